from decimal import Decimal

import pytest

from dashboard.forms import InvoiceForm, InvoiceIdForm
from dashboard.services.invoice_actions import InvoiceActions, to_minor_units
from tests.utils import FakeAuthProvider, FakeInvoiceStore, FakeRouteCache

GREATER_THAN_ZERO = "Please enter an amount greater than $0."
LESS_THAN_MAX = "Please enter an amount less than $99999999."
INVALID_STATUS = "Please select an invoice status."


@pytest.fixture
def actions():
    return InvoiceActions(FakeInvoiceStore(), FakeRouteCache(), FakeAuthProvider())


def _form(**overrides):
    data = {"customerId": "c1", "amount": "50", "status": "pending"}
    data.update(overrides)
    return data


def test_valid_input_is_typed(actions):
    result = actions.validate(InvoiceForm, _form())
    assert result.success
    assert result.errors == {}
    assert result.data == {
        "customer_id": "c1",
        "amount": Decimal("50"),
        "status": "pending",
    }


@pytest.mark.parametrize(
    "amount", ["0.01", "1", "10.5", "99999998.99", " 42 "]
)
def test_amounts_inside_range_are_accepted(actions, amount):
    result = actions.validate(InvoiceForm, _form(amount=amount))
    assert result.success, result.errors


@pytest.mark.parametrize(
    "amount, message",
    [
        ("0", GREATER_THAN_ZERO),
        ("-5", GREATER_THAN_ZERO),
        ("", GREATER_THAN_ZERO),
        (None, GREATER_THAN_ZERO),
        ("99999999", LESS_THAN_MAX),
        ("123456789", LESS_THAN_MAX),
        ("abc", "Please enter a valid amount."),
        ("NaN", "Please enter a valid amount."),
        ("Infinity", "Please enter a valid amount."),
    ],
)
def test_amounts_outside_range_are_rejected(actions, amount, message):
    result = actions.validate(InvoiceForm, _form(amount=amount))
    assert not result.success
    assert result.errors == {"amount": [message]}


@pytest.mark.parametrize("status", ["pending", "paid"])
def test_known_statuses_are_accepted(actions, status):
    assert actions.validate(InvoiceForm, _form(status=status)).success


@pytest.mark.parametrize("status", ["void", "PAID", "", None])
def test_unknown_statuses_are_rejected(actions, status):
    result = actions.validate(InvoiceForm, _form(status=status))
    assert not result.success
    assert result.errors == {"status": [INVALID_STATUS]}


@pytest.mark.parametrize("customer_id", ["", None])
def test_customer_is_required(actions, customer_id):
    result = actions.validate(InvoiceForm, _form(customerId=customer_id))
    assert result.errors == {"customerId": ["Please select a customer."]}


def test_empty_submission_reports_every_field(actions):
    result = actions.validate(InvoiceForm, {})
    assert not result.success
    assert result.errors == {
        "customerId": ["Please select a customer."],
        "amount": [GREATER_THAN_ZERO],
        "status": [INVALID_STATUS],
    }


def test_server_assigned_fields_are_ignored(actions):
    result = actions.validate(
        InvoiceForm, _form(id="forged", date="1999-01-01")
    )
    assert result.success
    assert "id" not in result.data
    assert "date" not in result.data


def test_validate_accepts_werkzeug_multidict(actions):
    from werkzeug.datastructures import MultiDict

    form = MultiDict([("customerId", "c1"), ("amount", "5"), ("status", "paid")])
    assert actions.validate(InvoiceForm, form).success


def test_id_schema(actions):
    assert actions.validate(InvoiceIdForm, {"id": "i1"}).data == {
        "invoice_id": "i1"
    }
    assert actions.validate(InvoiceIdForm, {"id": ""}).errors == {
        "id": ["Please provide an invoice ID."]
    }
    assert actions.validate(InvoiceIdForm, {"id": "x" * 37}).errors == {
        "id": ["Invoice ID is too long."]
    }


@pytest.mark.parametrize(
    "amount, cents",
    [
        ("50", 5000),
        ("10.5", 1050),
        ("0.01", 1),
        ("19.999", 2000),
        ("0.005", 1),
        ("99999998.99", 9999999899),
    ],
)
def test_to_minor_units(amount, cents):
    assert to_minor_units(Decimal(amount)) == cents
