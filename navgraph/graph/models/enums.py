"""Enums for the graph domain."""

from enum import Enum


class NodeType(str, Enum):
    """Kinds of navigable UI state.

    - LABEL: Static content, no user input
    - INPUT: Collects a value from the user
    - BRANCH: Decision point resolved by branch conditions
    - ACTION: Performs a side effect (submit, call out)
    - COMPOSITE: Groups child nodes; entering it enters its entry child
    """

    LABEL = "label"
    INPUT = "input"
    BRANCH = "branch"
    ACTION = "action"
    COMPOSITE = "composite"


class IntentSource(str, Enum):
    """Where an intent in the intent vector came from."""

    EXPLICIT = "explicit"
    INFERRED = "inferred"
