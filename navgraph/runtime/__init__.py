"""Navigation runtime."""

from navgraph.runtime.models import NavigationResult
from navgraph.runtime.navigator import NavigationService

__all__ = ["NavigationResult", "NavigationService"]
