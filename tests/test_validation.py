"""Tests for roster validation."""

import pytest

from core.validation import validate_client, validate_prices, validate_supervision_config
from models.payroll import Client, SupervisionConfig


def make_client(name="Ζωή Κουσουλού", price=50.0, employee_price=22.5, company_price=27.5, **kw):
    kw.setdefault("id", "c1")
    kw.setdefault("employee_id", "emp-1")
    return Client(
        name=name, price=price, employee_price=employee_price, company_price=company_price, **kw
    )


def test_valid_client():
    assert validate_client(make_client()) == []


def test_split_within_tolerance():
    assert validate_prices(15.5, 7.75, 7.754, 1000) == []


@pytest.mark.parametrize(
    "prices,expected",
    [
        ((50.0, 20.0, 20.0), "must equal price"),
        ((50.0, -1.0, 51.0), "Negative employee price"),
        ((1200.0, 600.0, 600.0), "exceeds maximum"),
        ((float("nan"), 10.0, 10.0), "Invalid price"),
        ((50.0, 60.0, -10.0), "Negative company price"),
    ],
)
def test_invalid_prices(prices, expected):
    errors = validate_prices(*prices, max_price=1000)

    assert any(expected in e for e in errors)


def test_share_above_total():
    errors = validate_prices(50.0, 60.0, 0.0, 1000)

    assert "Employee price cannot exceed the session price" in errors


def test_blank_name():
    assert "Client name is required" in validate_client(make_client(name="  "))


def test_duplicate_name_for_same_employee():
    existing = [make_client(id="c9", name="ΖΩΉ ΚΟΥΣΟΥΛΟΎ Online")]

    errors = validate_client(make_client(), existing)

    assert errors == ["Client 'ΖΩΉ ΚΟΥΣΟΥΛΟΎ Online' already exists for this employee"]


def test_same_name_other_employee_or_same_id_is_allowed():
    existing = [
        make_client(id="c9", employee_id="emp-2"),
        make_client(id="c1"),
    ]

    assert validate_client(make_client(), existing) == []


def test_supervision_config():
    assert validate_supervision_config(SupervisionConfig(True, 30.0, 15.0, 15.0, ("Εποπτεία",))) == []
    assert validate_supervision_config(SupervisionConfig(True, 600.0, 300.0, 300.0, ("Εποπτεία",)))
    assert validate_supervision_config(SupervisionConfig(True, 30.0, 15.0, 15.0, ()))
    assert validate_supervision_config(SupervisionConfig(False, 30.0, 15.0, 15.0, ())) == []
