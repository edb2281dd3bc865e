"""Core typelink modules for process representation and validation."""

from .definition import Operation, OperationNode, ProcessNode
from .exceptions import (
    AmbiguousOutputError,
    AmbiguousProducerError,
    DagError,
    DuplicateAliasError,
    InvalidNamingRequestError,
    LinkError,
    LinkErrorKind,
    NodeNotFoundError,
    TypelinkError,
)
from .ports import Endpoint, ExplicitLink, Node, Port, automatic_name
from .process_schema import PROCESS_SCHEMA, ValidationError, validate_process
from .settings import SettingsManager, TypelinkSettings, load_settings

__all__ = [
    "PROCESS_SCHEMA",
    "AmbiguousOutputError",
    "AmbiguousProducerError",
    "DagError",
    "DuplicateAliasError",
    "Endpoint",
    "ExplicitLink",
    "InvalidNamingRequestError",
    "LinkError",
    "LinkErrorKind",
    "Node",
    "NodeNotFoundError",
    "Operation",
    "OperationNode",
    "Port",
    "ProcessNode",
    "SettingsManager",
    "TypelinkError",
    "TypelinkSettings",
    "ValidationError",
    "automatic_name",
    "load_settings",
    "validate_process",
]
