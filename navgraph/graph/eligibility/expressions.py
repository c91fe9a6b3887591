"""Safe evaluation of eligibility and branch expressions."""

import ast
from collections.abc import Callable
from typing import Any

from simpleeval import (
    EvalWithCompoundTypes,
    InvalidExpression,
    IterableTooLong,
    NameNotDefined,
    NumberTooHigh,
)

from navgraph.exceptions import PredicateEvaluationError
from navgraph.observability.logging import get_logger

logger = get_logger(__name__)

# Constructs an eligibility expression may use; anything else is rejected
# when the graph is validated.
_ALLOWED_NODES: tuple[type[ast.AST], ...] = (
    ast.Expression,
    ast.BoolOp,
    ast.And,
    ast.Or,
    ast.UnaryOp,
    ast.Not,
    ast.USub,
    ast.UAdd,
    ast.BinOp,
    ast.Add,
    ast.Sub,
    ast.Mult,
    ast.Div,
    ast.FloorDiv,
    ast.Mod,
    ast.Pow,
    ast.Compare,
    ast.Eq,
    ast.NotEq,
    ast.Lt,
    ast.LtE,
    ast.Gt,
    ast.GtE,
    ast.In,
    ast.NotIn,
    ast.Is,
    ast.IsNot,
    ast.IfExp,
    ast.Call,
    ast.Name,
    ast.Load,
    ast.Constant,
    ast.Subscript,
    ast.Slice,
    ast.List,
    ast.Tuple,
    ast.Set,
    ast.Dict,
)


class ExpressionEvaluator:
    """Evaluate boolean expressions over a user context with simpleeval.

    No arbitrary code execution: only the whitelisted functions below plus
    ``intent(name)`` and ``has_role(name)`` bound to the evaluated context.

    Undefined names make the expression false rather than raising, so a
    node gated on ``plan == "pro"`` is simply ineligible until ``plan`` is
    known. Syntax errors and disallowed constructs raise
    PredicateEvaluationError.
    """

    SAFE_FUNCTIONS: dict[str, Callable[..., Any]] = {
        "len": len,
        "abs": abs,
        "min": min,
        "max": max,
        "lower": lambda s: s.lower() if isinstance(s, str) else s,
        "upper": lambda s: s.upper() if isinstance(s, str) else s,
        "int": int,
        "float": float,
        "str": str,
        "bool": bool,
    }

    def evaluate(self, expression: str, names: dict[str, Any]) -> bool:
        """Evaluate an expression to a boolean.

        Args:
            expression: e.g. ``age >= 18 and intent("checkout") > 0.5``
            names: Values visible to the expression (see UserContext.evaluation_names)

        Raises:
            PredicateEvaluationError: If the expression is malformed
        """
        evaluator = EvalWithCompoundTypes(
            names=names,
            functions=self._functions_for(names),
        )

        try:
            return bool(evaluator.eval(expression))

        except NameNotDefined as e:
            logger.debug("expression_undefined_name", expression=expression, error=str(e))
            return False

        except (NumberTooHigh, IterableTooLong) as e:
            # value-dependent limits, not malformed expressions
            logger.warning(
                "expression_limit_exceeded",
                expression=expression,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        except (SyntaxError, InvalidExpression) as e:
            raise PredicateEvaluationError(expression, str(e)) from e

        except (
            KeyError,
            IndexError,
            TypeError,
            ValueError,
            AttributeError,
            ArithmeticError,
        ) as e:
            logger.warning(
                "expression_evaluation_failed",
                expression=expression,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    def validate_syntax(self, expression: str) -> str | None:
        """Return an error message if the expression is malformed, else None.

        The check is static: every node of the parsed expression must be an
        allowed construct and every call must name a known function. Names
        are not resolved, since variables only exist at evaluation time.
        """
        try:
            tree = ast.parse(expression.strip(), mode="eval")
        except SyntaxError as e:
            return f"Invalid syntax: {e.msg}"

        functions = self._functions_for({})
        for node in ast.walk(tree):
            if not isinstance(node, _ALLOWED_NODES):
                return f"'{type(node).__name__}' is not allowed in expressions"
            if isinstance(node, ast.Call):
                if not isinstance(node.func, ast.Name):
                    return "Only named functions can be called"
                if node.func.id not in functions:
                    return f"Unknown function '{node.func.id}'"
            if isinstance(node, ast.Name) and node.id.startswith("_"):
                return f"Name '{node.id}' is not allowed"
        return None

    def _functions_for(self, names: dict[str, Any]) -> dict[str, Callable[..., Any]]:
        intents: dict[str, float] = names.get("intents") or {}
        roles: list[str] = names.get("roles") or []

        def intent(name: str) -> float:
            return float(intents.get(name, 0.0))

        def has_role(name: str) -> bool:
            return name in roles

        return {**self.SAFE_FUNCTIONS, "intent": intent, "has_role": has_role}
