"""Validated mutations behind the invoice dashboard forms.

Every action follows the same linear pass: validate the submitted form,
issue a single statement through the injected store, then invalidate the
cached listing and either redirect or report a status message.  Failures are
returned as :class:`State` values so the views can re-render them; nothing
here raises across the view boundary except unrecognised authentication
errors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional, Type, Union

from flask import current_app, has_app_context
from wtforms import Form

from dashboard.forms import InvoiceForm, InvoiceIdForm, as_formdata
from dashboard.services.auth_provider import AuthError, CredentialsSignin
from dashboard.services.ports import (
    AuthProviderPort,
    InvoiceStorePort,
    RouteCachePort,
)

INVOICES_PATH = "/dashboard/invoices"
DELETED_MESSAGE = "Deleted Invoice."

CREDENTIALS_PROVIDER = "credentials"


@dataclass
class State:
    """Outcome rendered back to the form that submitted the action."""

    errors: Dict[str, List[str]] = field(default_factory=dict)
    message: Optional[str] = None
    # Set when the action completed and there is no page to redirect to.
    succeeded: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"message": self.message}
        if self.errors:
            data["errors"] = self.errors
        return data


@dataclass(frozen=True)
class Redirect:
    """Terminal success: the caller should navigate to ``location``."""

    location: str


@dataclass
class ValidationResult:
    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    errors: Dict[str, List[str]] = field(default_factory=dict)


ActionResult = Union[State, Redirect]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_minor_units(amount: Decimal) -> int:
    """Convert a major-unit amount to whole cents, rounding half up."""

    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _logger():
    return current_app.logger if has_app_context() else logging.getLogger(__name__)


class InvoiceActions:
    """Create, update and delete invoices from untyped form input."""

    def __init__(
        self,
        store: InvoiceStorePort,
        cache: RouteCachePort,
        auth: AuthProviderPort,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.cache = cache
        self.auth = auth
        self.clock = clock

    # ------------------------------------------------------------------
    def validate(
        self, schema: Type[Form], raw_input: Optional[Mapping[str, Any]]
    ) -> ValidationResult:
        """Run ``schema`` over ``raw_input`` without raising.

        On failure ``errors`` maps each submitted field name to its list of
        messages, ready to display next to the input.
        """
        form = schema(formdata=as_formdata(raw_input))
        if form.validate():
            return ValidationResult(success=True, data=dict(form.data))
        errors = {f.name: list(f.errors) for f in form if f.errors}
        return ValidationResult(success=False, errors=errors)

    # ------------------------------------------------------------------
    def create_invoice(self, form_data: Mapping[str, Any]) -> ActionResult:
        result = self.validate(InvoiceForm, form_data)
        if not result.success:
            return State(
                errors=result.errors,
                message="Missing Fields. Failed to Create Invoice.",
            )

        customer_id = result.data["customer_id"]
        amount_in_cents = to_minor_units(result.data["amount"])
        status = result.data["status"]
        invoice_date = self.clock().astimezone(timezone.utc).date()

        try:
            self.store.insert(customer_id, amount_in_cents, status, invoice_date)
        except Exception:
            _logger().exception(
                "Failed to create invoice for customer %s", customer_id
            )
            return State(message="Database Error: Failed to Create Invoice.")

        self.cache.invalidate(INVOICES_PATH)
        return Redirect(INVOICES_PATH)

    def update_invoice(
        self, invoice_id: str, form_data: Mapping[str, Any]
    ) -> ActionResult:
        id_result = self.validate(InvoiceIdForm, {"id": invoice_id})
        if not id_result.success:
            return State(
                errors=id_result.errors,
                message="Invalid Invoice ID. Failed to Update Invoice.",
            )

        result = self.validate(InvoiceForm, form_data)
        if not result.success:
            return State(
                errors=result.errors,
                message="Missing Fields. Failed to Update Invoice.",
            )

        customer_id = result.data["customer_id"]
        amount_in_cents = to_minor_units(result.data["amount"])
        status = result.data["status"]

        try:
            matched = self.store.update(
                invoice_id, customer_id, amount_in_cents, status
            )
        except Exception:
            _logger().exception("Failed to update invoice %s", invoice_id)
            return State(message="Database Error: Failed to Update Invoice.")

        if not matched:
            _logger().warning("Update matched no invoice with id %s", invoice_id)

        self.cache.invalidate(INVOICES_PATH)
        return Redirect(INVOICES_PATH)

    def delete_invoice(self, invoice_id: str) -> State:
        id_result = self.validate(InvoiceIdForm, {"id": invoice_id})
        if not id_result.success:
            return State(
                errors=id_result.errors,
                message="Invalid Invoice ID. Failed to Delete Invoice.",
            )

        invoice_id = id_result.data["invoice_id"]
        try:
            removed = self.store.delete(invoice_id)
        except Exception:
            _logger().exception("Failed to delete invoice %s", invoice_id)
            return State(message="Database Error: Failed to Delete Invoice.")

        if not removed:
            _logger().warning("Delete matched no invoice with id %s", invoice_id)

        self.cache.invalidate(INVOICES_PATH)
        return State(message=DELETED_MESSAGE, succeeded=True)

    # ------------------------------------------------------------------
    def authenticate(self, form_data: Mapping[str, Any]) -> Optional[str]:
        """Sign in with submitted credentials.

        Returns ``None`` on success or a message for the login form.  Errors
        that are not :class:`AuthError` propagate to the caller.
        """
        try:
            self.auth.sign_in(CREDENTIALS_PROVIDER, form_data)
        except AuthError as error:
            if error.type == CredentialsSignin.type:
                return "Invalid credentials."
            return "Something went wrong."
        return None
