from decimal import Decimal

from werkzeug.datastructures import MultiDict
from wtforms import Form, PasswordField, RadioField, StringField
from wtforms import DecimalField as WTFormsDecimalField
from wtforms.validators import AnyOf, Email, InputRequired, Length, ValidationError

from dashboard.models import INVOICE_STATUSES

# Upper bound on the major-unit amount accepted from the invoice form.
MAX_INVOICE_AMOUNT = Decimal("99999999")


def as_formdata(raw_input):
    """Wrap a plain mapping so WTForms can read it like submitted form data.

    Keys mapped to ``None`` are dropped and behave as if never submitted.
    """
    if raw_input is None:
        return MultiDict()
    if isinstance(raw_input, MultiDict):
        return raw_input
    return MultiDict(
        {key: value for key, value in raw_input.items() if value is not None}
    )


class AmountField(WTFormsDecimalField):
    """Decimal field that coerces blank input to zero.

    Browsers submit an empty string for an untouched number input and omit
    the key entirely when the input is disabled.  Both become ``0`` so that
    the range validators report the lower-bound message instead of a parse
    error.  Values such as ``"NaN"`` or ``"Infinity"`` parse as decimals but
    are rejected here.
    """

    def __init__(self, *args, render_kw=None, **kwargs):
        render_kw = dict(render_kw or {})
        render_kw.setdefault("inputmode", "decimal")
        render_kw.setdefault("step", "0.01")
        super().__init__(*args, render_kw=render_kw, **kwargs)

    def process_formdata(self, valuelist):
        if not valuelist or valuelist[0] is None or not str(valuelist[0]).strip():
            self.data = Decimal(0)
            return

        try:
            super().process_formdata([str(valuelist[0]).strip()])
        except ValueError:
            raise ValueError("Please enter a valid amount.")
        if self.data is not None and not self.data.is_finite():
            self.data = None
            raise ValueError("Please enter a valid amount.")


class GreaterThan:
    """Require ``field.data`` to be strictly greater than ``minimum``."""

    def __init__(self, minimum, message=None):
        self.minimum = minimum
        self.message = message or f"Must be greater than {minimum}."

    def __call__(self, form, field):
        # Parse failures are already reported by the field itself.
        if field.data is None:
            return
        if not field.data > self.minimum:
            raise ValidationError(self.message)


class LessThan:
    """Require ``field.data`` to be strictly less than ``maximum``."""

    def __init__(self, maximum, message=None):
        self.maximum = maximum
        self.message = message or f"Must be less than {maximum}."

    def __call__(self, form, field):
        if field.data is None:
            return
        if not field.data < self.maximum:
            raise ValidationError(self.message)


class InvoiceForm(Form):
    """Fields accepted when creating or updating an invoice.

    ``id`` and ``date`` are assigned by the server and never read from input.
    Field names match the HTML input names posted by the dashboard.
    """

    customer_id = StringField(
        "Customer",
        name="customerId",
        validators=[InputRequired(message="Please select a customer.")],
    )
    amount = AmountField(
        "Amount",
        validators=[
            GreaterThan(0, message="Please enter an amount greater than $0."),
            LessThan(
                MAX_INVOICE_AMOUNT,
                message="Please enter an amount less than $99999999.",
            ),
        ],
    )
    status = RadioField(
        "Status",
        choices=[(status, status.title()) for status in INVOICE_STATUSES],
        validate_choice=False,
        validators=[
            AnyOf(INVOICE_STATUSES, message="Please select an invoice status.")
        ],
    )


class InvoiceIdForm(Form):
    """Identifier check used before updating or deleting an invoice."""

    invoice_id = StringField(
        "Invoice",
        name="id",
        validators=[
            InputRequired(message="Please provide an invoice ID."),
            Length(max=36, message="Invoice ID is too long."),
        ],
    )


class LoginForm(Form):
    email = StringField("Email", validators=[InputRequired(), Email()])
    password = PasswordField(
        "Password", validators=[InputRequired(), Length(min=6)]
    )
