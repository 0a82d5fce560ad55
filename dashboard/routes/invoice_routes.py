from dataclasses import dataclass
from decimal import Decimal
from typing import Tuple

from flask import (
    Blueprint,
    abort,
    current_app,
    flash,
    redirect,
    render_template,
    request,
    url_for,
)
from flask_login import login_required
from sqlalchemy import String, cast, or_

from dashboard import db
from dashboard.forms import InvoiceForm
from dashboard.models import INVOICE_STATUSES, Customer, Invoice
from dashboard.services.invoice_actions import (
    INVOICES_PATH,
    Redirect,
    State,
)
from dashboard.utils.activity import log_activity
from dashboard.utils.pagination import build_pagination_args, get_per_page

invoice = Blueprint("invoice", __name__)


@dataclass(frozen=True)
class InvoiceRow:
    id: str
    customer_name: str
    customer_email: str
    amount: int
    status: str
    date: str


@dataclass(frozen=True)
class InvoicePage:
    rows: Tuple[InvoiceRow, ...]
    page: int
    pages: int
    total: int


def _actions():
    return current_app.extensions["invoice_actions"]


def _load_invoice_page(query_text, status, page, per_page):
    query = Invoice.query.outerjoin(Customer)
    if query_text:
        pattern = f"%{query_text}%"
        query = query.filter(
            or_(
                Customer.name.ilike(pattern),
                Customer.email.ilike(pattern),
                cast(Invoice.amount, String).ilike(pattern),
                cast(Invoice.date, String).ilike(pattern),
                Invoice.status.ilike(pattern),
            )
        )
    if status in INVOICE_STATUSES:
        query = query.filter(Invoice.status == status)

    results = query.order_by(Invoice.date.desc(), Invoice.id).paginate(
        page=page, per_page=per_page, error_out=False
    )
    rows = tuple(
        InvoiceRow(
            id=inv.id,
            customer_name=inv.customer.name if inv.customer else "",
            customer_email=inv.customer.email if inv.customer else "",
            amount=inv.amount,
            status=inv.status,
            date=inv.date.isoformat(),
        )
        for inv in results.items
    )
    return InvoicePage(
        rows=rows, page=results.page, pages=results.pages, total=results.total
    )


def _render_form(form, state, title, action, status_code=200):
    customers = Customer.query.order_by(Customer.name).all()
    return (
        render_template(
            "invoices/invoice_form.html",
            form=form,
            state=state,
            customers=customers,
            title=title,
            action=action,
        ),
        status_code,
    )


def _failure_status(state: State) -> int:
    return 400 if state.errors else 500


@invoice.route("/")
@login_required
def index():
    return redirect(url_for("invoice.view_invoices"))


@invoice.route(INVOICES_PATH)
@login_required
def view_invoices():
    """Display invoices with optional search and status filter."""
    page = request.args.get("page", 1, type=int)
    per_page = get_per_page()
    query_text = request.args.get("query", "").strip()
    status = request.args.get("status", "all")

    cache = current_app.extensions["route_cache"]
    invoice_page = cache.fetch(
        INVOICES_PATH,
        (query_text, status, page, per_page),
        lambda: _load_invoice_page(query_text, status, page, per_page),
    )
    return render_template(
        "invoices/view_invoices.html",
        invoices=invoice_page,
        query=query_text,
        status=status,
        statuses=INVOICE_STATUSES,
        pagination_args=build_pagination_args(per_page),
    )


@invoice.route(f"{INVOICES_PATH}/create", methods=["GET", "POST"])
@login_required
def create_invoice():
    """Create an invoice from the submitted form."""
    action = url_for("invoice.create_invoice")
    if request.method == "POST":
        result = _actions().create_invoice(request.form)
        if isinstance(result, Redirect):
            log_activity("Created invoice")
            flash("Invoice created successfully!", "success")
            return redirect(result.location)
        return _render_form(
            InvoiceForm(formdata=request.form),
            result,
            "Create Invoice",
            action,
            _failure_status(result),
        )
    return _render_form(InvoiceForm(), State(), "Create Invoice", action)


@invoice.route(f"{INVOICES_PATH}/<invoice_id>/edit", methods=["GET", "POST"])
@login_required
def edit_invoice(invoice_id):
    """Edit the customer, amount and status of an invoice."""
    action = url_for("invoice.edit_invoice", invoice_id=invoice_id)
    if request.method == "POST":
        result = _actions().update_invoice(invoice_id, request.form)
        if isinstance(result, Redirect):
            log_activity(f"Edited invoice {invoice_id}")
            flash("Invoice updated successfully!", "success")
            return redirect(result.location)
        return _render_form(
            InvoiceForm(formdata=request.form),
            result,
            "Edit Invoice",
            action,
            _failure_status(result),
        )

    record = db.session.get(Invoice, invoice_id)
    if record is None:
        abort(404)
    form = InvoiceForm(
        data={
            "customer_id": record.customer_id,
            "amount": Decimal(record.amount) / 100,
            "status": record.status,
        }
    )
    return _render_form(form, State(), "Edit Invoice", action)


@invoice.route(f"{INVOICES_PATH}/<invoice_id>/delete", methods=["POST"])
@login_required
def delete_invoice(invoice_id):
    """Delete an invoice and return to the listing."""
    state = _actions().delete_invoice(invoice_id)
    if state.succeeded:
        log_activity(f"Deleted invoice {invoice_id}")
        flash(state.message, "success")
    else:
        flash(state.message, "danger")
    return redirect(url_for("invoice.view_invoices"))
