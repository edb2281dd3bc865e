"""Custom exceptions for typelink."""

from enum import Enum
from typing import Any, Optional


class TypelinkError(Exception):
    """Base exception for all typelink errors."""

    pass


class LinkErrorKind(str, Enum):
    """Structured variant carried by every linking failure."""

    NODE_NOT_FOUND = "node_not_found"
    AMBIGUOUS_OR_MISSING_OUTPUT = "ambiguous_or_missing_output"
    AMBIGUOUS_PRODUCER = "ambiguous_producer"
    INVALID_NAMING_REQUEST = "invalid_naming_request"
    DUPLICATE_ALIAS = "duplicate_alias"


class LinkError(TypelinkError):
    """Error raised while linking a process, with rich context.

    Linking is all-or-nothing: once one of these is raised no partial graph
    is returned and nothing is retried.

    Attributes:
        kind: Which linking failure occurred
        phase: The resolution phase where the error occurred
        alias: Alias of the node being linked (if applicable)
        details: Additional context about the error
        suggestion: Helpful suggestion for fixing the error
    """

    kind: LinkErrorKind

    def __init__(
        self,
        message: str,
        phase: str = "unknown",
        alias: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ):
        self.message = message
        self.phase = phase
        self.alias = alias
        self.details = details or {}
        self.suggestion = suggestion

        parts = [f"linker: {message}"]
        if phase != "unknown":
            parts.append(f"Phase: {phase}")
        if alias:
            parts.append(f"Node: {alias}")
        if suggestion:
            parts.append(f"Suggestion: {suggestion}")

        super().__init__("\n".join(parts))


class NodeNotFoundError(LinkError):
    """An explicit link names a source alias that doesn't match exactly one node."""

    kind = LinkErrorKind.NODE_NOT_FOUND

    def __init__(self, source_alias: str, consumer_alias: Optional[str] = None):
        self.source_alias = source_alias
        super().__init__(
            f"Didn't find exactly 1 node aliased '{source_alias}'",
            phase="explicit_links",
            alias=consumer_alias,
            details={"source_alias": source_alias},
            suggestion="Check the 'source' of the node's explicit links",
        )


class AmbiguousOutputError(LinkError):
    """A node's unique-output-of-type lookup found zero or several outputs."""

    kind = LinkErrorKind.AMBIGUOUS_OR_MISSING_OUTPUT

    def __init__(self, alias: str, data_type: str, candidates: list[str]):
        self.data_type = data_type
        self.candidates = candidates

        if candidates:
            message = (
                f"Node '{alias}' has {len(candidates)} outputs of type '{data_type}': "
                f"[{', '.join(repr(c) for c in candidates)}]"
            )
            suggestion = "Name the output with 'source_property' in the explicit link"
        else:
            message = f"Node '{alias}' has no output of type '{data_type}'"
            suggestion = None

        super().__init__(
            message,
            phase="explicit_links",
            alias=alias,
            details={"data_type": data_type, "candidates": candidates},
            suggestion=suggestion,
        )


class AmbiguousProducerError(LinkError):
    """More than one unused producer remains for a data type."""

    kind = LinkErrorKind.AMBIGUOUS_PRODUCER

    def __init__(self, data_type: str, aliases: list[str]):
        self.data_type = data_type
        self.aliases = aliases
        super().__init__(
            f"Ambiguity: Found multiple unused producers for data type ({data_type}): "
            f"[{', '.join(repr(a) for a in aliases)}]",
            phase="implicit_links",
            details={"data_type": data_type, "aliases": aliases},
            suggestion="Add explicit links so that at most one producer is left unused",
        )


class InvalidNamingRequestError(LinkError):
    """Automatic naming was asked to name no endpoint at all."""

    kind = LinkErrorKind.INVALID_NAMING_REQUEST

    def __init__(self, message: str):
        super().__init__(message, phase="naming")


class DuplicateAliasError(LinkError):
    """Two nodes of one process share an alias."""

    kind = LinkErrorKind.DUPLICATE_ALIAS

    def __init__(self, alias: str):
        super().__init__(
            f"Alias '{alias}' is used by more than one node",
            phase="definition",
            alias=alias,
            suggestion="Give every node in a process a distinct alias",
        )


class DagError(TypelinkError):
    """Raised when the graph builder is asked for an inconsistent mutation."""

    pass
