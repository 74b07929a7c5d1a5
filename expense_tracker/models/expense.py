"""
Expense Record Model

One Expense is one purchase the user typed in: how much, a handful of
free-form tags, and when it happened.

DESIGN DECISION: The model is frozen. There is no edit operation in the
app - an expense is either kept, or deleted and entered again - so no
field may be reassigned once the record exists.

Amount positivity is NOT checked here. It is a rule for new input
(see validation.validator), and records read back from disk are
accepted as they were written.
"""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


def utc_now() -> datetime:
    """Current time as an aware datetime."""
    return datetime.now(timezone.utc)


class Expense(BaseModel):
    """A single recorded expense."""

    model_config = ConfigDict(frozen=True)

    # Identity
    id: UUID = Field(
        default_factory=uuid4,
        description="Unique expense ID"
    )

    amount: Decimal = Field(
        ...,
        allow_inf_nan=False,
        description="Amount spent"
    )
    tags: list[str] = Field(
        default_factory=list,
        description="Free-form tags, in the order they were entered"
    )
    date: datetime = Field(
        default_factory=utc_now,
        description="When the purchase happened"
    )

    @field_validator('tags')
    @classmethod
    def strip_tags(cls, v: list[str]) -> list[str]:
        """Strip surrounding whitespace; drop tags that end up empty."""
        stripped = (tag.strip() for tag in v)
        return [tag for tag in stripped if tag]

    @field_validator('date')
    @classmethod
    def make_aware(cls, v: datetime) -> datetime:
        """Naive datetimes are read as local time."""
        if v.tzinfo is None or v.tzinfo.utcoffset(v) is None:
            return v.astimezone()
        return v
