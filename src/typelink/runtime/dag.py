"""Default graph builder for linked processes.

A ``Dag`` accumulates the operations of one process, the links between
their ports and the process's boundary inputs and outputs. It does not
execute anything; ``to_dict()`` gives a plain representation that can be
serialized or handed to a scheduler.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from typelink.core.exceptions import DagError

logger = logging.getLogger(__name__)


class GraphBuilder(Protocol):
    """Mutations the linker issues while resolving a process."""

    def add_operation(self, operation: Any) -> None: ...

    def connect_input(self, input_property: str, destination: Any, destination_property: str) -> None: ...

    def connect_output(self, output_property: str, source: Any, source_property: str) -> None: ...

    def create_link(self, source: Any, source_property: str, destination: Any, destination_property: str) -> None: ...


@dataclass(frozen=True)
class Link:
    source: str
    source_property: str
    destination: str
    destination_property: str


@dataclass(frozen=True)
class Binding:
    """One end of a boundary port: an operation name and its property."""

    operation: str
    property_name: str


class Dag:
    """Operations, links and boundary ports of one linked process."""

    def __init__(self, name: str):
        self.name = name
        self.operations: list[Any] = []
        self.links: list[Link] = []
        self.inputs: dict[str, list[Binding]] = {}
        self.outputs: dict[str, Binding] = {}

    @classmethod
    def create(cls, name: str) -> "Dag":
        return cls(name=name)

    def __repr__(self) -> str:
        return f"Dag(name={self.name!r}, operations={len(self.operations)}, links={len(self.links)})"

    def operation_named(self, name: str) -> Optional[Any]:
        for operation in self.operations:
            if operation.name == name:
                return operation
        return None

    def add_operation(self, operation: Any) -> None:
        name = getattr(operation, "name", None)
        if not name:
            raise DagError(f"Operation {operation!r} has no name")
        if self.operation_named(name) is not None:
            raise DagError(f"Dag '{self.name}' already contains an operation named '{name}'")
        self.operations.append(operation)

    def connect_input(self, input_property: str, destination: Any, destination_property: str) -> None:
        self._require_added(destination)
        binding = Binding(destination.name, destination_property)
        bindings = self.inputs.setdefault(input_property, [])
        if binding in bindings:
            raise DagError(f"Input '{input_property}' is already connected to {binding.operation}.{destination_property}")
        bindings.append(binding)
        logger.debug(
            "Connected boundary input",
            extra={"phase": "build", "dag": self.name, "input": input_property, "destination": destination.name},
        )

    def connect_output(self, output_property: str, source: Any, source_property: str) -> None:
        self._require_added(source)
        if output_property in self.outputs:
            raise DagError(f"Dag '{self.name}' already has an output named '{output_property}'")
        self.outputs[output_property] = Binding(source.name, source_property)
        logger.debug(
            "Connected boundary output",
            extra={"phase": "build", "dag": self.name, "output": output_property, "source": source.name},
        )

    def create_link(self, source: Any, source_property: str, destination: Any, destination_property: str) -> None:
        self._require_added(source)
        self._require_added(destination)
        self.links.append(Link(source.name, source_property, destination.name, destination_property))

    def _require_added(self, operation: Any) -> None:
        if self.operation_named(operation.name) is not operation:
            raise DagError(f"Operation '{operation.name}' has not been added to dag '{self.name}'")

    def to_dict(self) -> dict[str, Any]:
        """Plain representation of the dag, nested dags included."""
        return {
            "name": self.name,
            "operations": [op.to_dict() for op in self.operations],
            "links": [
                {
                    "source": link.source,
                    "source_property": link.source_property,
                    "destination": link.destination,
                    "destination_property": link.destination_property,
                }
                for link in self.links
            ],
            "inputs": {
                name: [{"destination": b.operation, "destination_property": b.property_name} for b in bindings]
                for name, bindings in self.inputs.items()
            },
            "outputs": {
                name: {"source": b.operation, "source_property": b.property_name}
                for name, b in self.outputs.items()
            },
        }
