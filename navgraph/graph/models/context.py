"""User context and intent vector models."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from navgraph.graph.models.enums import IntentSource

RESERVED_NAMES = frozenset({"intents", "primary_intent", "roles", "locale", "user_id"})


class Intent(BaseModel):
    """A user goal with the confidence it was inferred with."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    source: IntentSource = Field(default=IntentSource.INFERRED)


class UserContext(BaseModel):
    """Everything eligibility predicates and branches may inspect.

    ``version`` increases on every mutation made through the methods
    below; eligibility results are cached against it, so callers must
    not mutate ``variables`` or ``intents`` in place.
    """

    session_id: UUID | None = Field(default=None)
    user_id: str | None = Field(default=None)
    variables: dict[str, Any] = Field(default_factory=dict)
    intents: list[Intent] = Field(default_factory=list)
    roles: list[str] = Field(default_factory=list)
    locale: str | None = Field(default=None)
    version: int = Field(default=0, ge=0)

    def set_variables(self, updates: dict[str, Any], *, replace: bool = False) -> None:
        """Merge (or replace) variables and bump the version."""
        self.variables = dict(updates) if replace else {**self.variables, **updates}
        self.version += 1

    def remove_variables(self, names: list[str]) -> None:
        self.variables = {k: v for k, v in self.variables.items() if k not in names}
        self.version += 1

    def set_intents(self, intents: list[Intent]) -> None:
        self.intents = list(intents)
        self.version += 1

    def add_intent(self, intent: Intent) -> None:
        """Add an intent, replacing any existing intent of the same name."""
        self.intents = [i for i in self.intents if i.name != intent.name] + [intent]
        self.version += 1

    def primary_intent(self) -> Intent | None:
        """Highest-confidence intent; explicit beats inferred on equal confidence."""
        if not self.intents:
            return None
        return max(
            self.intents,
            key=lambda i: (i.confidence, i.source == IntentSource.EXPLICIT),
        )

    def intent_scores(self) -> dict[str, float]:
        scores: dict[str, float] = {}
        for intent in self.intents:
            scores[intent.name] = max(scores.get(intent.name, 0.0), intent.confidence)
        return scores

    def evaluation_names(self) -> dict[str, Any]:
        """Names visible to expressions.

        Variables are exposed directly; RESERVED_NAMES shadow variables
        of the same name.
        """
        primary = self.primary_intent()
        return {
            **self.variables,
            "intents": self.intent_scores(),
            "primary_intent": primary.name if primary else None,
            "roles": list(self.roles),
            "locale": self.locale,
            "user_id": self.user_id,
        }

    def snapshot(self) -> dict[str, Any]:
        """Serializable copy for audit records."""
        return self.model_dump(
            mode="json",
            include={"variables", "intents", "roles", "locale", "user_id", "version"},
        )
