"""API exception hierarchy.

All API exceptions inherit from NavGraphAPIError, which carries the
status_code and error_code the global handler renders. Domain errors
are translated with ``from_domain_error``.
"""

from navgraph.api.models.errors import ErrorCode, ErrorDetail
from navgraph.exceptions import (
    GraphNotFoundError,
    GraphValidationError,
    InvalidTransitionError,
    NavGraphError,
    NodeNotFoundError,
    PredicateEvaluationError,
    SessionCompletedError,
    SessionNotFoundError,
)


class NavGraphAPIError(Exception):
    """Base exception for all API errors."""

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, details: list[ErrorDetail] | None = None) -> None:
        self.message = message
        self.details = details or []
        super().__init__(message)


class InvalidRequestError(NavGraphAPIError):
    status_code = 400
    error_code = ErrorCode.INVALID_REQUEST


class GraphNotFoundAPIError(NavGraphAPIError):
    status_code = 404
    error_code = ErrorCode.GRAPH_NOT_FOUND


class NodeNotFoundAPIError(NavGraphAPIError):
    status_code = 404
    error_code = ErrorCode.NODE_NOT_FOUND


class SessionNotFoundAPIError(NavGraphAPIError):
    status_code = 404
    error_code = ErrorCode.SESSION_NOT_FOUND


class SessionNotActiveError(NavGraphAPIError):
    status_code = 409
    error_code = ErrorCode.SESSION_NOT_ACTIVE


class InvalidTransitionAPIError(NavGraphAPIError):
    status_code = 409
    error_code = ErrorCode.INVALID_TRANSITION


class GraphInvalidError(NavGraphAPIError):
    status_code = 422
    error_code = ErrorCode.GRAPH_INVALID


class InvalidExpressionError(NavGraphAPIError):
    status_code = 422
    error_code = ErrorCode.INVALID_EXPRESSION


class MetricsDisabledError(NavGraphAPIError):
    status_code = 404
    error_code = ErrorCode.METRICS_DISABLED


_DOMAIN_ERRORS: list[tuple[type[NavGraphError], type[NavGraphAPIError]]] = [
    (GraphNotFoundError, GraphNotFoundAPIError),
    (NodeNotFoundError, NodeNotFoundAPIError),
    (SessionNotFoundError, SessionNotFoundAPIError),
    (SessionCompletedError, SessionNotActiveError),
    (InvalidTransitionError, InvalidTransitionAPIError),
    (GraphValidationError, GraphInvalidError),
    (PredicateEvaluationError, InvalidExpressionError),
]


def from_domain_error(exc: NavGraphError) -> NavGraphAPIError:
    """Translate a domain error into its API error."""
    for domain_type, api_type in _DOMAIN_ERRORS:
        if isinstance(exc, domain_type):
            details = []
            if isinstance(exc, GraphValidationError):
                details = [ErrorDetail(message=error) for error in exc.errors]
            return api_type(exc.message, details)
    return NavGraphAPIError(exc.message)
