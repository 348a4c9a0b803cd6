"""projx: project-scoped buffer operations."""

__version__ = "0.1.0"
