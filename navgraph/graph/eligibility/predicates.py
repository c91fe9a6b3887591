"""Registry of human-authored Python eligibility predicates."""

from collections.abc import Callable

from navgraph.graph.models.context import UserContext

Predicate = Callable[[UserContext], bool]


class PredicateRegistry:
    """Named predicates that nodes reference via ``GraphNode.predicates``.

    Expressions cover most gating; predicates exist for checks that need
    real code (date math, lookups against in-process tables).

    Example:
        registry = PredicateRegistry()

        @registry.register("is_adult")
        def is_adult(ctx: UserContext) -> bool:
            return ctx.variables.get("age", 0) >= 18
    """

    def __init__(self) -> None:
        self._predicates: dict[str, Predicate] = {}

    def register(self, name: str) -> Callable[[Predicate], Predicate]:
        def decorator(fn: Predicate) -> Predicate:
            self.add(name, fn)
            return fn

        return decorator

    def add(self, name: str, fn: Predicate) -> None:
        if name in self._predicates:
            raise ValueError(f"Predicate already registered: {name}")
        self._predicates[name] = fn

    def remove(self, name: str) -> None:
        self._predicates.pop(name, None)

    def get(self, name: str) -> Predicate | None:
        return self._predicates.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._predicates

    def names(self) -> list[str]:
        return sorted(self._predicates)
