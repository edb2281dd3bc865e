"""Runtime module for linking typelink processes into graphs."""

from .compiler import compile_process, load_process, load_process_file
from .dag import Dag, GraphBuilder
from .linker import BoundaryPort, LinkResolver, LinkResult

__all__ = [
    "BoundaryPort",
    "Dag",
    "GraphBuilder",
    "LinkResolver",
    "LinkResult",
    "compile_process",
    "load_process",
    "load_process_file",
]
