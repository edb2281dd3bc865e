"""Type-directed linking of the operation nodes of one process.

Given the nodes of a process, ``LinkResolver`` wires them into a graph:

1. every explicit link and explicit input a node declares is applied first,
2. remaining input ports are matched to unused output ports of exactly the
   same data type ("implicit" links),
3. whatever is left unmatched becomes the process's own boundary inputs and
   outputs.

If more than one unused producer exists for a data type when its implicit
links are resolved, linking fails; ambiguity is never resolved by picking
one.

Results are cached per requested graph name. ``inputs()`` and ``outputs()``
read the terminal state of the resolution cached under the default name.
"""

import logging
from collections.abc import Iterable, Sequence, Set
from dataclasses import dataclass
from typing import Any, Callable, Optional

from pydantic import BaseModel

from typelink.core.exceptions import (
    AmbiguousOutputError,
    AmbiguousProducerError,
    DuplicateAliasError,
    LinkError,
    NodeNotFoundError,
)
from typelink.core.ports import Endpoint, ExplicitLink, Node, automatic_name

from .dag import Dag, GraphBuilder

logger = logging.getLogger(__name__)

DEFAULT_GRAPH_NAME = ""


class BoundaryPort(BaseModel, frozen=True):
    """A process-level input or output: a data type and its automatic name."""

    type: str
    name: str


@dataclass(frozen=True)
class Resolution:
    """A finished resolution run: its graph and terminal tracking state."""

    graph: Any
    used_producers: frozenset[Endpoint]
    satisfied_consumers: frozenset[Endpoint]


@dataclass
class LinkResult:
    """Outcome of ``LinkResolver.resolve``: a graph or the error that prevented it."""

    graph: Optional[Any] = None
    error: Optional[LinkError] = None

    @property
    def success(self) -> bool:
        return self.error is None


class LinkResolver:
    """Links the nodes of one process into a graph.

    The node set is fixed at construction. Each uncached ``build`` resets
    the tracking sets and runs explicit-then-implicit resolution to
    completion; no two builds may run on one instance at the same time.

    Args:
        nodes: The process's nodes, in declaration order
        builder_factory: Creates an empty graph builder for a given name
    """

    def __init__(
        self,
        nodes: Iterable[Node],
        builder_factory: Callable[[str], GraphBuilder] = Dag.create,
    ):
        self._nodes: tuple[Node, ...] = tuple(nodes)
        self._builder_factory = builder_factory

        self._nodes_by_alias: dict[str, Node] = {}
        for node in self._nodes:
            if node.alias in self._nodes_by_alias:
                raise DuplicateAliasError(node.alias)
            self._nodes_by_alias[node.alias] = node

        self._involved_types: Optional[tuple[str, ...]] = None
        self._resolutions: dict[str, Resolution] = {}

        self._used_producers: set[Endpoint] = set()
        self._satisfied_consumers: set[Endpoint] = set()

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._nodes

    def node(self, alias: str) -> Optional[Node]:
        """Look up a node by alias; None if no node carries it."""
        return self._nodes_by_alias.get(alias)

    def build(self, name: str = DEFAULT_GRAPH_NAME) -> Any:
        """Build (or return the cached) graph for ``name``.

        Raises:
            LinkError: If linking fails; nothing is cached in that case
        """
        return self._resolve(name).graph

    def resolve(self, name: str = DEFAULT_GRAPH_NAME) -> LinkResult:
        """Like ``build`` but returns linking failures instead of raising them."""
        try:
            return LinkResult(graph=self.build(name))
        except LinkError as e:
            return LinkResult(error=e)

    def inputs(self) -> list[BoundaryPort]:
        """Boundary inputs: per data type, the consumers nothing satisfied."""
        resolution = self._resolve(DEFAULT_GRAPH_NAME)
        result = []
        for data_type in self.involved_types():
            consumers = self._consumers_of(data_type, excluding=resolution.satisfied_consumers)
            if consumers:
                result.append(BoundaryPort(type=data_type, name=automatic_name(consumers)))
        return result

    def explicit_boundary_inputs(self) -> list[BoundaryPort]:
        """Inputs bound explicitly by their nodes, one port per bound property.

        They are satisfied during linking and so never appear in ``inputs()``,
        yet the built graph still exposes each of them as a boundary input.
        """
        result = []
        for node in self._nodes:
            for property_name in node.explicit_inputs():
                consumer = Endpoint.of(node, property_name)
                result.append(BoundaryPort(type=consumer.type, name=automatic_name([consumer])))
        return result

    def outputs(self) -> list[BoundaryPort]:
        """Boundary outputs: per data type, the producers nothing used."""
        resolution = self._resolve(DEFAULT_GRAPH_NAME)
        result = []
        for data_type in self.involved_types():
            producers = self._producers_of(data_type, excluding=resolution.used_producers)
            if producers:
                result.append(BoundaryPort(type=data_type, name=automatic_name(producers)))
        return result

    def involved_types(self) -> tuple[str, ...]:
        """Distinct data types on any port of any node, in first-seen order."""
        if self._involved_types is None:
            data_types: dict[str, None] = {}
            for node in self._nodes:
                for port in node.inputs():
                    data_types.setdefault(port.type)
                for port in node.outputs():
                    data_types.setdefault(port.type)
            self._involved_types = tuple(data_types)
        return self._involved_types

    def _resolve(self, name: str) -> Resolution:
        cached = self._resolutions.get(name)
        if cached is not None:
            logger.debug("Using cached resolution", extra={"phase": "cache", "graph_name": name})
            return cached

        self._used_producers = set()
        self._satisfied_consumers = set()
        try:
            graph = self._builder_factory(name)
            self._add_operations_to(graph)
            self._add_explicit_links_to(graph)
            self._add_implicit_links_to(graph)

            resolution = Resolution(
                graph=graph,
                used_producers=frozenset(self._used_producers),
                satisfied_consumers=frozenset(self._satisfied_consumers),
            )
        finally:
            self._used_producers = set()
            self._satisfied_consumers = set()

        self._resolutions[name] = resolution
        logger.info(
            "Linked process",
            extra={
                "phase": "complete",
                "graph_name": name,
                "node_count": len(self._nodes),
                "used_producers": len(resolution.used_producers),
                "satisfied_consumers": len(resolution.satisfied_consumers),
            },
        )
        return resolution

    def _add_operations_to(self, graph: GraphBuilder) -> None:
        for node in self._nodes:
            graph.add_operation(node.underlying_operation())

    def _add_explicit_links_to(self, graph: GraphBuilder) -> None:
        for node in self._nodes:
            for link in node.explicit_internal_links():
                producer = self._producer_for_link(link, node)
                consumer = Endpoint.of(node, link.property_name)
                if producer not in self._used_producers:
                    self._use(producer)
                self._create_link(graph, producer, consumer)

            for property_name in node.explicit_inputs():
                consumer = Endpoint.of(node, property_name)
                graph.connect_input(
                    input_property=automatic_name([consumer]),
                    destination=consumer.operation,
                    destination_property=consumer.property_name,
                )
                self._satisfy(consumer)

    def _producer_for_link(self, link: ExplicitLink, destination: Node) -> Endpoint:
        source = self.node(link.source)
        if source is None:
            raise NodeNotFoundError(link.source, consumer_alias=destination.alias)

        data_type = destination.type_of(link.property_name)
        if link.source_property is None:
            port = source.unique_output_of_type(data_type)
        else:
            matches = [p for p in source.outputs_of(data_type) if p.property_name == link.source_property]
            if len(matches) != 1:
                raise AmbiguousOutputError(
                    source.alias, data_type, [p.property_name for p in source.outputs_of(data_type)]
                )
            port = matches[0]

        return Endpoint.of(source, port.property_name)

    def _add_implicit_links_to(self, graph: GraphBuilder) -> None:
        for data_type in self.involved_types():
            self._add_implicit_links_for_type(graph, data_type)

    def _add_implicit_links_for_type(self, graph: GraphBuilder, data_type: str) -> None:
        consumers = self._consumers_of(data_type, excluding=self._satisfied_consumers)
        producers = self._producers_of(data_type, excluding=self._used_producers)

        if len(producers) == 1:
            producer = producers[0]
            if consumers:
                self._use(producer)
                for consumer in consumers:
                    self._create_link(graph, producer, consumer)
            else:
                graph.connect_output(
                    output_property=automatic_name([producer]),
                    source=producer.operation,
                    source_property=producer.property_name,
                )

        elif len(producers) > 1:
            raise AmbiguousProducerError(data_type, [p.alias for p in producers])

        elif consumers:
            input_name = automatic_name(consumers)
            for consumer in consumers:
                graph.connect_input(
                    input_property=input_name,
                    destination=consumer.operation,
                    destination_property=consumer.property_name,
                )

    def _consumers_of(self, data_type: str, excluding: Set[Endpoint]) -> list[Endpoint]:
        return [
            endpoint
            for endpoint in self._endpoints(data_type, inputs=True)
            if endpoint not in excluding
        ]

    def _producers_of(self, data_type: str, excluding: Set[Endpoint]) -> list[Endpoint]:
        return [
            endpoint
            for endpoint in self._endpoints(data_type, inputs=False)
            if endpoint not in excluding
        ]

    def _endpoints(self, data_type: str, inputs: bool) -> Sequence[Endpoint]:
        result = []
        for node in self._nodes:
            ports = node.inputs_of(data_type) if inputs else node.outputs_of(data_type)
            result.extend(Endpoint.of(node, port.property_name) for port in ports)
        return result

    def _create_link(self, graph: GraphBuilder, producer: Endpoint, consumer: Endpoint) -> None:
        self._satisfy(consumer)

        graph.create_link(
            source=producer.operation,
            source_property=producer.property_name,
            destination=consumer.operation,
            destination_property=consumer.property_name,
        )
        logger.debug(
            "Linked %s -> %s",
            producer.name,
            consumer.name,
            extra={"phase": "link", "source": producer.alias, "destination": consumer.alias},
        )

    def _use(self, producer: Endpoint) -> None:
        self._used_producers.add(producer)

    def _satisfy(self, consumer: Endpoint) -> None:
        self._satisfied_consumers.add(consumer)
