"""Request body models for the write boundary API."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class EntityCreateLine(BaseModel):
    """One line item of a transaction creation request.

    Attributes:
        item: Item full name for item-based lines.
        account: Account full name for account-based lines.
        description: Optional line description.
        quantity: Optional item quantity.
        rate: Optional item rate.
        amount: Line amount; required for account-based lines.
        side: `debit` or `credit`; credit lines only apply to journal entries.
    """

    model_config = ConfigDict(extra="forbid")

    item: str | None = None
    account: str | None = None
    description: str | None = None
    quantity: Decimal | None = None
    rate: Decimal | None = None
    amount: Decimal | None = None
    side: Literal["debit", "credit"] | None = None


class EntityCreateRequest(BaseModel):
    """Creation request body accepted by `POST /entities/{kind}`.

    Transaction kinds read `counterpart`, `account`, `txn_date`, `ref_number`,
    `memo`, `amount`, and `lines`; list kinds read `name`, `company_name`, and
    `email`. Which fields are required depends on the entity kind.
    """

    model_config = ConfigDict(extra="forbid")

    counterpart: str | None = None
    account: str | None = None
    txn_date: date | None = None
    ref_number: str | None = Field(default=None, max_length=20)
    memo: str | None = None
    amount: Decimal | None = None
    name: str | None = None
    company_name: str | None = None
    email: str | None = None
    lines: list[EntityCreateLine] = Field(default_factory=list)

    def api_create_fields(self) -> dict[str, Any]:
        """Return populated fields as a plain mapping for request building."""

        create_fields = self.model_dump(exclude_none=True)
        create_fields["lines"] = [line.model_dump(exclude_none=True) for line in self.lines]
        return create_fields
