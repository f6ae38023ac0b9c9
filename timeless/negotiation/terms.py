"""Deal terms value object and the pure merge applied on every transition."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from timeless.core.enums import RightsType, UsageType


class DealTerms(BaseModel):
    """Complete set of negotiable terms carried by a deal."""

    model_config = ConfigDict(frozen=True)

    usage_type: UsageType
    rights: RightsType
    duration: int = Field(ge=1, description="Licence duration in months.")
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)


class TermsChanges(BaseModel):
    """Partial terms diff; only the fields that were sent are applied."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    usage_type: UsageType | None = None
    rights: RightsType | None = None
    duration: int | None = Field(default=None, ge=1)
    price: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)

    def as_patch(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)

    def as_record(self) -> dict[str, Any]:
        """JSON-safe form stored on the history entry."""
        return self.model_dump(mode="json", exclude_none=True)

    def is_empty(self) -> bool:
        return not self.as_patch()


def merge_terms(current: DealTerms, changes: TermsChanges | None) -> DealTerms:
    """Overwrite the fields present in ``changes`` and keep every other field."""
    if changes is None or changes.is_empty():
        return current
    return current.model_copy(update=changes.as_patch())
