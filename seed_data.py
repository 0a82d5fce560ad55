from datetime import date

from dashboard import create_admin_user, create_app, db
from dashboard.models import Customer, Invoice

DEMO_CUSTOMERS = [
    ("Delba de Oliveira", "delba@oliveira.com"),
    ("Lee Robinson", "lee@robinson.com"),
    ("Hector Simpson", "hector@simpson.com"),
    ("Steven Tey", "steven@tey.com"),
]

# (customer index, amount in cents, status, date)
DEMO_INVOICES = [
    (0, 15795, "pending", date(2022, 12, 6)),
    (1, 20348, "pending", date(2022, 11, 14)),
    (2, 3040, "paid", date(2022, 10, 29)),
    (3, 44800, "paid", date(2023, 9, 10)),
    (0, 34577, "pending", date(2023, 8, 5)),
    (1, 54246, "pending", date(2023, 7, 16)),
    (2, 666, "pending", date(2023, 6, 27)),
    (3, 32545, "paid", date(2023, 6, 9)),
]


def seed_initial_data() -> None:
    """Seed the database with an admin user, customers and invoices."""
    app = create_app([])
    with app.app_context():
        create_admin_user()

        if Customer.query.count() == 0:
            customers = [
                Customer(name=name, email=email) for name, email in DEMO_CUSTOMERS
            ]
            db.session.add_all(customers)
            db.session.flush()
            db.session.add_all(
                Invoice(
                    customer_id=customers[index].id,
                    amount=amount,
                    status=status,
                    date=invoice_date,
                )
                for index, amount, status, invoice_date in DEMO_INVOICES
            )

        db.session.commit()
        print("Initial admin user, customers and invoices created.")


if __name__ == "__main__":
    seed_initial_data()
