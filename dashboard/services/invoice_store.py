from datetime import date

from sqlalchemy import delete, insert, update
from sqlalchemy.exc import SQLAlchemyError

from dashboard.models import Invoice

invoices = Invoice.__table__


class SqlInvoiceStore:
    """Invoice writes issued as single bound-parameter statements.

    ``session`` is usually ``db.session``; each call commits on success and
    rolls back before re-raising on failure so the session stays usable for
    the rest of the request.
    """

    def __init__(self, session):
        self.session = session

    def insert(
        self, customer_id: str, amount: int, status: str, invoice_date: date
    ) -> str:
        stmt = insert(invoices).values(
            customer_id=customer_id,
            amount=amount,
            status=status,
            date=invoice_date,
        )
        result = self._execute(stmt)
        return result.inserted_primary_key[0]

    def update(
        self, invoice_id: str, customer_id: str, amount: int, status: str
    ) -> int:
        stmt = (
            update(invoices)
            .where(invoices.c.id == invoice_id)
            .values(customer_id=customer_id, amount=amount, status=status)
        )
        return self._execute(stmt).rowcount

    def delete(self, invoice_id: str) -> int:
        stmt = delete(invoices).where(invoices.c.id == invoice_id)
        return self._execute(stmt).rowcount

    def _execute(self, stmt):
        try:
            result = self.session.execute(stmt)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        return result
