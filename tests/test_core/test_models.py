from datetime import date, datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError as SchemaError

from finance_tracker.errors import ValidationError
from finance_tracker.models import TransactionKind, categories_for, validate_draft
from finance_tracker.schemas import TransactionPayload, parse_record, parse_records

from factories import make_draft


@pytest.mark.parametrize("raw, expected", [
    ("Income", TransactionKind.income),
    ("income", TransactionKind.income),
    (" INCOME ", TransactionKind.income),
    ("Expense", TransactionKind.expense),
    ("transfer", TransactionKind.expense),
    (None, TransactionKind.expense),
])
def test_kind_from_wire(raw, expected):
    assert TransactionKind.from_wire(raw) is expected


def test_vocabularies_contain_other():
    for kind in TransactionKind:
        assert "other" in categories_for(kind)
    assert categories_for(TransactionKind.expense)[:2] == ("food", "transport")


def test_validate_draft_normalizes():
    draft = validate_draft(make_draft(description="  Coffee ", amount="3,50"))

    assert draft.description == "Coffee"
    assert draft.amount == Decimal("3.50")


def test_validate_draft_rejects_nan():
    with pytest.raises(ValidationError):
        validate_draft(make_draft(amount="NaN"))


def test_validate_draft_rejects_bool_amount():
    with pytest.raises(ValidationError):
        validate_draft(make_draft(amount=True))


def test_parse_record_mongo_shape():
    tx = parse_record({
        "_id": "65a1", "type": "Expense", "description": "Bus", "amount": 2.5,
        "category": "transport", "date": "2024-01-09T00:00:00.000Z", "__v": 0,
    })

    assert tx.id == "65a1"
    assert tx.amount == Decimal("2.5")
    assert tx.date == date(2024, 1, 9)


def test_parse_record_accepts_plain_id_and_datetime():
    tx = parse_record({
        "id": 7, "type": "Income", "description": "Gift", "amount": "10",
        "category": "other", "date": datetime(2024, 2, 3, 18, 30),
    })

    assert tx.id == "7"
    assert tx.kind is TransactionKind.income
    assert tx.date == date(2024, 2, 3)


def test_parse_record_requires_id():
    with pytest.raises(SchemaError):
        parse_record({"type": "Expense", "amount": 1, "date": "2024-01-01"})


def test_parse_records_requires_list():
    with pytest.raises(ValueError):
        parse_records({"items": []})


def test_payload_uses_canonical_wire_values():
    payload = TransactionPayload.from_draft(validate_draft(make_draft(
        kind=TransactionKind.income, category="freelance", amount=Decimal("120.25"),
    ))).to_json()

    assert payload == {
        "type": "Income",
        "description": "Groceries",
        "amount": 120.25,
        "category": "freelance",
        "date": "2024-01-15",
    }
