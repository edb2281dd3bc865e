"""typelink - type-directed linking of workflow processes."""

__version__ = "0.1.0"
