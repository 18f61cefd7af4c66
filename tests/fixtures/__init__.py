"""Shared testing fixtures for the snipweave test suite."""

from .dependencies import FakeDependencies  # noqa: F401
from .project import ProjectBuilder, build_tree  # noqa: F401

__all__ = [
    "FakeDependencies",
    "ProjectBuilder",
    "build_tree",
]
