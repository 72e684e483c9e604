"""
Схемы обмена с удалённым API транзакций.

Сервер отдаёт записи в формате MongoDB (`_id`, `type` = "Income"/"Expense",
дата может прийти полной ISO-строкой со временем). Здесь запись приводится
к доменной `Transaction`, а черновик превращается в тело POST/PUT.
"""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from finance_tracker.models import Transaction, TransactionDraft, TransactionKind


class TransactionRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    type: Any = None
    description: str = ""
    amount: Decimal
    category: str = ""
    date: dt.date

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, v):
        if v is None or v == "":
            raise ValueError("missing id")
        return str(v)

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_to_decimal(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return Decimal(str(v))
        return v

    @field_validator("date", mode="before")
    @classmethod
    def _date_only(cls, v):
        # Время суток не нужно: оставляем только календарную дату
        if isinstance(v, dt.datetime):
            return v.date()
        if isinstance(v, str):
            return v.strip()[:10]
        return v

    def to_domain(self) -> Transaction:
        return Transaction(
            id=self.id,
            kind=TransactionKind.from_wire(self.type),
            description=self.description,
            amount=self.amount,
            category=self.category,
            date=self.date,
        )


class TransactionPayload(BaseModel):
    type: str
    description: str
    amount: float
    category: str
    date: dt.date

    @classmethod
    def from_draft(cls, draft: TransactionDraft) -> "TransactionPayload":
        return cls(
            type=TransactionKind(draft.kind).to_wire(),
            description=draft.description,
            amount=float(draft.amount),
            category=draft.category,
            date=draft.date,
        )

    def to_json(self) -> dict:
        return self.model_dump(mode="json")


def parse_record(data: Any) -> Transaction:
    return TransactionRecord.model_validate(data).to_domain()


def parse_records(data: Any) -> list[Transaction]:
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of transactions, got {type(data).__name__}")
    return [parse_record(item) for item in data]
