"""Ports, endpoints and the node interface the linker consumes.

A node is anything that can describe its typed input and output ports and
its explicit wiring. The linker never looks inside a node beyond the
``Node`` protocol below, so test doubles and nested processes can stand in
for ordinary operations.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, runtime_checkable

from .exceptions import InvalidNamingRequestError


@dataclass(frozen=True)
class Port:
    """A named, typed attachment point on a node."""

    property_name: str
    type: str


@dataclass(frozen=True)
class ExplicitLink:
    """A declared connection from ``source`` into this node's ``property_name``.

    ``source_property`` is optional; without it the producer is the source
    node's only output of the consumer property's type.
    """

    property_name: str
    source: str
    source_property: Optional[str] = None


@runtime_checkable
class Node(Protocol):
    """Capabilities the linker needs from one operation."""

    @property
    def alias(self) -> str: ...

    def inputs(self) -> list[Port]: ...

    def outputs(self) -> list[Port]: ...

    def inputs_of(self, data_type: str) -> list[Port]: ...

    def outputs_of(self, data_type: str) -> list[Port]: ...

    def explicit_internal_links(self) -> list[ExplicitLink]: ...

    def explicit_inputs(self) -> list[str]: ...

    def unique_output_of_type(self, data_type: str) -> Port: ...

    def type_of(self, property_name: str) -> str: ...

    def underlying_operation(self) -> Any: ...


@dataclass(frozen=True)
class Endpoint:
    """One port of one node, identified by ``(alias, property_name)``.

    The node itself rides along for operation and type lookups but takes no
    part in equality or hashing.
    """

    alias: str
    property_name: str
    node: Node = field(compare=False, hash=False, repr=False)

    @classmethod
    def of(cls, node: Node, property_name: str) -> "Endpoint":
        return cls(alias=node.alias, property_name=property_name, node=node)

    @property
    def name(self) -> str:
        return f"{self.alias}.{self.property_name}"

    @property
    def type(self) -> str:
        return self.node.type_of(self.property_name)

    @property
    def operation(self) -> Any:
        return self.node.underlying_operation()


def automatic_name(endpoints: Sequence[Optional[Endpoint]]) -> str:
    """Compute the boundary port name for one or more endpoints.

    Args:
        endpoints: Non-empty ordered list of endpoints

    Returns:
        ``"alias.prop"`` for a single endpoint, otherwise
        ``"(a.x+b.y+...)"`` in list order

    Raises:
        InvalidNamingRequestError: If the list is empty or holds None

    Examples:
        >>> automatic_name([Endpoint.of(reader, "path")])
        'reader.path'
        >>> automatic_name([Endpoint.of(a, "x"), Endpoint.of(b, "y")])
        '(a.x+b.y)'
    """
    if len(endpoints) > 1:
        return "({})".format("+".join(_name_component(e) for e in endpoints))
    elif len(endpoints) == 1:
        return _name_component(endpoints[0])
    else:
        raise InvalidNamingRequestError("Require at least one endpoint to compute a port name")


def _name_component(endpoint: Optional[Endpoint]) -> str:
    if endpoint is None:
        raise InvalidNamingRequestError("Got undefined value for endpoint")
    return endpoint.name
