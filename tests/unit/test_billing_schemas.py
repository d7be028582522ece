"""Unit tests for billing request schemas."""

import pytest
from pydantic import ValidationError

from billmate.models.enums import BillStatus
from billmate.schemas.billing import BillCreate, BillUpdate, OcrData, PaymentVerifyRequest


# ---------------------------------------------------------------------------
# OcrData
# ---------------------------------------------------------------------------

def test_ocr_data_accepts_both_date_formats():
    assert OcrData(date="05/03/2026").date == "05/03/2026"
    assert OcrData(date="05-03-2026").date == "05-03-2026"


def test_ocr_data_accepts_time_with_and_without_seconds():
    assert OcrData(time="14:30").time == "14:30"
    assert OcrData(time="14:30:59").time == "14:30:59"


def test_ocr_data_rejects_amount_over_limit():
    with pytest.raises(ValidationError):
        OcrData(amount=10_000_001)


def test_ocr_data_rejects_negative_amount():
    with pytest.raises(ValidationError):
        OcrData(amount=-1)


@pytest.mark.parametrize("value", ["2026-03-05", "5/3/2026", "tomorrow"])
def test_ocr_data_rejects_bad_date(value):
    with pytest.raises(ValidationError):
        OcrData(date=value)


@pytest.mark.parametrize("value", ["2pm", "1430", "14:3"])
def test_ocr_data_rejects_bad_time(value):
    with pytest.raises(ValidationError):
        OcrData(time=value)


def test_ocr_data_unset_fields_are_not_dumped():
    """Partial corrections only carry the fields the admin sent."""
    assert OcrData(amount=1200).model_dump(exclude_unset=True) == {"amount": 1200}


# ---------------------------------------------------------------------------
# Bills
# ---------------------------------------------------------------------------

def test_bill_update_cannot_set_verified():
    with pytest.raises(ValidationError):
        BillUpdate(status=BillStatus.VERIFIED)


def test_bill_update_allows_overdue():
    assert BillUpdate(status=BillStatus.OVERDUE).status == BillStatus.OVERDUE


def test_bill_create_month_bounds():
    from uuid import uuid4

    with pytest.raises(ValidationError):
        BillCreate(room_id=uuid4(), tenant_id=uuid4(), month=13, year=2026)


def test_verify_request_reason_optional_at_schema_level():
    body = PaymentVerifyRequest(approved=False)
    assert body.rejection_reason is None
