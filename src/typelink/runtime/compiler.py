"""Process definition to linked graph compiler.

Turns a process definition document (see ``typelink.core.process_schema``)
into nodes, links them with ``LinkResolver`` and returns the resulting
``Dag``. Nested processes are compiled bottom-up: each one is linked on its
own and then wrapped as a ``ProcessNode`` of its parent.
"""

import json
import logging
from pathlib import Path
from typing import Any, Union

from typelink.core.definition import OperationNode, ProcessNode
from typelink.core.ports import ExplicitLink, Node, Port
from typelink.core.process_schema import validate_process

from .dag import Dag
from .linker import LinkResolver

logger = logging.getLogger(__name__)


def _parse_process_input(document: Union[str, dict[str, Any]]) -> dict[str, Any]:
    """Parse a process document from a JSON string or pass a dict through.

    Raises:
        json.JSONDecodeError: If string input contains invalid JSON
    """
    if isinstance(document, str):
        logger.debug("Parsing process from JSON string", extra={"phase": "parsing"})
        return json.loads(document)  # type: ignore[no-any-return]

    logger.debug("Process provided as dictionary", extra={"phase": "parsing"})
    return document


def _ports(entries: list[dict[str, Any]]) -> list[Port]:
    return [Port(property_name=entry["name"], type=entry["type"]) for entry in entries]


def _links(entries: list[dict[str, Any]]) -> list[ExplicitLink]:
    return [
        ExplicitLink(
            property_name=entry["property"],
            source=entry["source"],
            source_property=entry.get("source_property"),
        )
        for entry in entries
    ]


def _node_from_entry(entry: dict[str, Any]) -> Node:
    links = _links(entry.get("links", []))
    explicit_inputs = list(entry.get("explicit_inputs", []))

    if "process" in entry:
        logger.debug("Compiling nested process", extra={"phase": "definition", "alias": entry["alias"]})
        return ProcessNode(
            alias=entry["alias"],
            process=resolver_from_definition(entry["process"]),
            links=links,
            explicit_inputs=explicit_inputs,
        )

    return OperationNode(
        alias=entry["alias"],
        operation=entry["operation"],
        inputs=_ports(entry.get("inputs", [])),
        outputs=_ports(entry.get("outputs", [])),
        links=links,
        explicit_inputs=explicit_inputs,
        params=entry.get("params"),
    )


def nodes_from_definition(definition: dict[str, Any]) -> list[Node]:
    """Create the nodes of an already validated process definition, in order."""
    return [_node_from_entry(entry) for entry in definition["nodes"]]


def resolver_from_definition(definition: dict[str, Any]) -> LinkResolver:
    """Create a ``LinkResolver`` for an already validated process definition."""
    return LinkResolver(nodes_from_definition(definition), builder_factory=Dag.create)


def load_process(document: Union[str, dict[str, Any]]) -> LinkResolver:
    """Validate a process document and create its resolver.

    Args:
        document: JSON string or dict holding the process definition

    Returns:
        A resolver over the document's nodes; nothing has been linked yet
        for top-level processes

    Raises:
        ValidationError: If the document or a node definition is invalid
        LinkError: If a nested process fails to link, or aliases repeat
    """
    definition = validate_process(_parse_process_input(document))
    return resolver_from_definition(definition)


def load_process_file(path: Union[str, Path]) -> LinkResolver:
    """Read a process document from ``path`` and create its resolver."""
    with open(path, encoding="utf-8") as f:
        return load_process(f.read())


def compile_process(document: Union[str, dict[str, Any]], name: str = "") -> Dag:
    """Link a process document into a ``Dag`` named ``name``.

    Raises:
        ValidationError: If the document is invalid
        LinkError: If linking fails
    """
    resolver = load_process(document)
    dag: Dag = resolver.build(name)
    logger.info(
        "Compiled process",
        extra={"phase": "complete", "graph_name": name, "operations": len(dag.operations), "links": len(dag.links)},
    )
    return dag
