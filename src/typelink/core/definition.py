"""Concrete node implementations.

``OperationNode`` describes a single operation with declared ports.
``ProcessNode`` wraps an already linked process so that it can be used as
one operation of an enclosing process; its ports are the wrapped process's
derived boundary inputs and outputs.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from .exceptions import AmbiguousOutputError
from .ports import ExplicitLink, Port
from .process_schema import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Operation:
    """A single operation handed to the graph builder."""

    name: str
    operation: str
    params: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "operation": self.operation, "params": dict(self.params)}


class _PortedNode:
    """Port queries shared by the node implementations."""

    alias: str

    def __init__(
        self,
        alias: str,
        inputs: list[Port],
        outputs: list[Port],
        links: Optional[list[ExplicitLink]] = None,
        explicit_inputs: Optional[list[str]] = None,
    ):
        self.alias = alias
        self._inputs = list(inputs)
        self._outputs = list(outputs)
        self._links = list(links or [])
        self._explicit_inputs = list(explicit_inputs or [])
        self._validate()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(alias={self.alias!r})"

    def _validate(self) -> None:
        for direction, ports in (("inputs", self._inputs), ("outputs", self._outputs)):
            seen: set[str] = set()
            for port in ports:
                if port.property_name in seen:
                    raise ValidationError(
                        f"Node '{self.alias}' declares {direction} property '{port.property_name}' twice",
                        path=f"{self.alias}.{direction}",
                    )
                seen.add(port.property_name)

        # Each input is fed by at most one link or explicit input
        input_names = {port.property_name for port in self._inputs}
        wired: set[str] = set()
        for link in self._links:
            if link.property_name not in input_names:
                raise ValidationError(
                    f"Node '{self.alias}' links undeclared input '{link.property_name}'",
                    path=f"{self.alias}.links",
                    suggestion=f"Declared inputs: {sorted(input_names)}",
                )
            if link.property_name in wired:
                raise ValidationError(
                    f"Node '{self.alias}' links input '{link.property_name}' more than once",
                    path=f"{self.alias}.links",
                    suggestion="Keep a single link per input property",
                )
            wired.add(link.property_name)
        for property_name in self._explicit_inputs:
            if property_name not in input_names:
                raise ValidationError(
                    f"Node '{self.alias}' marks undeclared input '{property_name}' as explicit",
                    path=f"{self.alias}.explicit_inputs",
                    suggestion=f"Declared inputs: {sorted(input_names)}",
                )
            if property_name in wired:
                raise ValidationError(
                    f"Node '{self.alias}' wires input '{property_name}' more than once",
                    path=f"{self.alias}.explicit_inputs",
                    suggestion="An input is either linked or explicit, and listed once",
                )
            wired.add(property_name)

    def inputs(self) -> list[Port]:
        return list(self._inputs)

    def outputs(self) -> list[Port]:
        return list(self._outputs)

    def inputs_of(self, data_type: str) -> list[Port]:
        return [port for port in self._inputs if port.type == data_type]

    def outputs_of(self, data_type: str) -> list[Port]:
        return [port for port in self._outputs if port.type == data_type]

    def explicit_internal_links(self) -> list[ExplicitLink]:
        return list(self._links)

    def explicit_inputs(self) -> list[str]:
        return list(self._explicit_inputs)

    def unique_output_of_type(self, data_type: str) -> Port:
        """The node's only output of ``data_type``.

        Raises:
            AmbiguousOutputError: If there are zero or several such outputs
        """
        candidates = self.outputs_of(data_type)
        if len(candidates) != 1:
            raise AmbiguousOutputError(self.alias, data_type, [port.property_name for port in candidates])
        return candidates[0]

    def type_of(self, property_name: str) -> str:
        for port in self._inputs + self._outputs:
            if port.property_name == property_name:
                return port.type
        raise KeyError(f"Node '{self.alias}' has no property '{property_name}'")


class OperationNode(_PortedNode):
    """One operation of a process, with its declared ports and wiring."""

    def __init__(
        self,
        alias: str,
        operation: str,
        inputs: Optional[list[Port]] = None,
        outputs: Optional[list[Port]] = None,
        links: Optional[list[ExplicitLink]] = None,
        explicit_inputs: Optional[list[str]] = None,
        params: Optional[dict[str, Any]] = None,
    ):
        super().__init__(alias, inputs or [], outputs or [], links, explicit_inputs)
        self.operation = operation
        self._underlying = Operation(name=alias, operation=operation, params=dict(params or {}))

    def underlying_operation(self) -> Any:
        return self._underlying


class LinkedProcess(Protocol):
    """What ``ProcessNode`` needs from the process it wraps."""

    def build(self, name: str = ...) -> Any: ...

    def inputs(self) -> list[Any]: ...

    def explicit_boundary_inputs(self) -> list[Any]: ...

    def outputs(self) -> list[Any]: ...


class ProcessNode(_PortedNode):
    """A linked process used as a single operation of an enclosing process.

    Each derived boundary input or output of the wrapped process becomes a
    port whose property name is the boundary port's automatic name. Inputs
    the wrapped process binds explicitly become ports too, so the enclosing
    process can feed them.
    Deriving the ports resolves the wrapped process, so linking errors in it
    surface when the node is constructed.
    """

    def __init__(
        self,
        alias: str,
        process: LinkedProcess,
        links: Optional[list[ExplicitLink]] = None,
        explicit_inputs: Optional[list[str]] = None,
    ):
        self.process = process
        boundary_inputs = list(process.inputs()) + list(process.explicit_boundary_inputs())
        inputs = [Port(property_name=port.name, type=port.type) for port in boundary_inputs]
        outputs = [Port(property_name=port.name, type=port.type) for port in process.outputs()]
        logger.debug(
            "Wrapped nested process",
            extra={"phase": "definition", "alias": alias, "inputs": len(inputs), "outputs": len(outputs)},
        )
        super().__init__(alias, inputs, outputs, links, explicit_inputs)

    def underlying_operation(self) -> Any:
        return self.process.build(self.alias)
