"""Unit tests for slip amount matching."""

from decimal import Decimal

from billmate.services.payment_service import evaluate_amount


def test_exact_amount_matches():
    check = evaluate_amount({"amount": 1000}, {}, Decimal("1000.00"))
    assert check.result == "match"
    assert check.is_match is True
    assert check.source == "ocr"
    assert check.difference == Decimal("0")


def test_one_baht_short_is_mismatch():
    check = evaluate_amount({"amount": 999}, {}, Decimal("1000.00"))
    assert check.result == "mismatch"
    assert check.is_match is False
    assert check.difference == Decimal("-1.00")


def test_difference_within_tolerance_matches():
    check = evaluate_amount({"amount": 1000.005}, {}, Decimal("1000.00"))
    assert check.result == "match"


def test_falls_back_to_qr_amount():
    check = evaluate_amount({}, {"amount": 500}, Decimal("500.00"))
    assert check.source == "qr"
    assert check.effective_amount == Decimal("500")
    assert check.result == "match"


def test_ocr_amount_wins_over_qr():
    check = evaluate_amount({"amount": 700}, {"amount": 500}, Decimal("500.00"))
    assert check.source == "ocr"
    assert check.result == "mismatch"


def test_zero_ocr_amount_counts_as_present():
    check = evaluate_amount({"amount": 0}, {"amount": 500}, Decimal("500.00"))
    assert check.source == "ocr"
    assert check.result == "mismatch"


def test_no_amount_cannot_verify():
    check = evaluate_amount({}, None, Decimal("1000.00"))
    assert check.result == "cannot_verify"
    assert check.is_match is None
    assert check.effective_amount is None
    assert check.bill_amount == Decimal("1000.00")


def test_non_numeric_amount_cannot_verify():
    check = evaluate_amount({"amount": "abc"}, {}, Decimal("1000.00"))
    assert check.result == "cannot_verify"
