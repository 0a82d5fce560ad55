import uuid
from datetime import datetime

from flask_login import UserMixin
from sqlalchemy.orm import relationship

from dashboard import db

INVOICE_STATUSES = ("pending", "paid")


def _generate_id():
    return str(uuid.uuid4())


class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, default="")
    email = db.Column(db.String(120), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    is_admin = db.Column(db.Boolean, default=False, nullable=False)
    active = db.Column(db.Boolean, default=False, nullable=False)


class Customer(db.Model):
    __tablename__ = "customers"

    id = db.Column(db.String(36), primary_key=True, default=_generate_id)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)

    invoices = db.relationship("Invoice", backref="customer", lazy=True)


class Invoice(db.Model):
    __tablename__ = "invoices"

    # The store generates identifiers; callers never supply one on insert.
    id = db.Column(db.String(36), primary_key=True, default=_generate_id)
    customer_id = db.Column(
        db.String(36), db.ForeignKey("customers.id"), nullable=False, index=True
    )
    # Minor currency units (cents); the largest accepted amount exceeds 32 bits.
    amount = db.Column(db.BigInteger, nullable=False)
    status = db.Column(db.String(16), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)

    __table_args__ = (
        # Sub-cent amounts round to zero and are still stored.
        db.CheckConstraint(
            "amount >= 0", name="ck_invoices_amount_non_negative"
        ),
        db.CheckConstraint(
            "status IN ('pending', 'paid')", name="ck_invoices_status"
        ),
    )


class ActivityLog(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=True)
    activity = db.Column(db.String(255), nullable=False)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", backref="activity_logs")
