"""Test factories for creating test data."""

from tests.factories.graph import GraphFactory

__all__ = ["GraphFactory"]
