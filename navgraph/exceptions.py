"""Domain error hierarchy for NavGraph.

Engine, context, and audit components raise these errors. The API layer
translates them into NavGraphAPIError subclasses with HTTP status codes.
"""


class NavGraphError(Exception):
    """Base exception for all NavGraph domain errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class GraphNotFoundError(NavGraphError):
    """Raised when a graph ID is not registered."""

    def __init__(self, graph_id: str) -> None:
        super().__init__(f"Graph not found: {graph_id}")
        self.graph_id = graph_id


class NodeNotFoundError(NavGraphError):
    """Raised when a node ID does not exist in a graph."""

    def __init__(self, node_id: str, graph_id: str | None = None) -> None:
        where = f" in graph {graph_id}" if graph_id else ""
        super().__init__(f"Node not found: {node_id}{where}")
        self.node_id = node_id
        self.graph_id = graph_id


class GraphValidationError(NavGraphError):
    """Raised when a graph definition is structurally invalid."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class SessionNotFoundError(NavGraphError):
    """Raised when a session ID does not exist."""

    def __init__(self, session_id: object) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class SessionCompletedError(NavGraphError):
    """Raised when stepping a session that is no longer active."""

    def __init__(self, session_id: object, status: str) -> None:
        super().__init__(f"Session {session_id} is {status}")
        self.session_id = session_id
        self.status = status


class InvalidTransitionError(NavGraphError):
    """Raised when a requested move is not an eligible edge."""

    def __init__(self, from_node_id: str, to_node_id: str, reason: str) -> None:
        super().__init__(
            f"Cannot transition from '{from_node_id}' to '{to_node_id}': {reason}"
        )
        self.from_node_id = from_node_id
        self.to_node_id = to_node_id
        self.reason = reason


class PredicateEvaluationError(NavGraphError):
    """Raised when an eligibility or branch expression cannot be parsed."""

    def __init__(self, expression: str, error: str) -> None:
        super().__init__(f"Invalid expression '{expression}': {error}")
        self.expression = expression
        self.error = error
