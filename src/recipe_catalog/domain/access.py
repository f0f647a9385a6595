"""Actor identity and access decision models."""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID

from recipe_catalog.domain.models import normalize_email


@dataclass(frozen=True)
class Actor:
    """Caller identity supplied to every core operation."""

    user_id: UUID | None = None
    email: str | None = None

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None

    @property
    def normalized_email(self) -> str | None:
        if not self.email:
            return None
        return normalize_email(self.email)


ANONYMOUS = Actor()


class Outcome(StrEnum):
    """Result of an operation that may be denied or miss its target."""

    OK = "ok"
    DENIED = "denied"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of a permission check and the rule that produced it."""

    allowed: bool
    rule: str

    def __bool__(self) -> bool:
        return self.allowed


DENY = AccessDecision(allowed=False, rule="denied")
