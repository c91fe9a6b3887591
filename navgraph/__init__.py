"""NavGraph - directed graph navigation engine with constrained AI orchestration."""

__version__ = "0.1.0"
