from __future__ import annotations

import os
import sys

import pytest
from werkzeug.security import generate_password_hash

from dashboard import create_admin_user, create_app, db
from dashboard.models import Customer, User

# Ensure the package is importable when tests change directories
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, BASE_DIR)


@pytest.fixture
def app(tmp_path, monkeypatch):
    os.environ.setdefault("SECRET_KEY", "testsecret")
    os.environ.setdefault("ADMIN_EMAIL", "admin@example.com")
    os.environ.setdefault("ADMIN_PASS", "adminpass")
    monkeypatch.setenv("RATELIMIT_ENABLED", "false")
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "dashboard.db"))

    cwd = os.getcwd()
    os.chdir(tmp_path)
    app = create_app(["--demo"])
    os.chdir(cwd)

    app.config.update({"TESTING": True, "WTF_CSRF_ENABLED": False})

    with app.app_context():
        db.create_all()
        create_admin_user()

        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user(app):
    """An active user who can sign in with ``password123``."""
    with app.app_context():
        account = User(
            name="Invoice Clerk",
            email="clerk@example.com",
            password=generate_password_hash("password123"),
            active=True,
        )
        db.session.add(account)
        db.session.commit()
        return account.email


@pytest.fixture
def customers(app):
    with app.app_context():
        records = [
            Customer(name="Lee Robinson", email="lee@robinson.com"),
            Customer(name="Steven Tey", email="steven@tey.com"),
        ]
        db.session.add_all(records)
        db.session.commit()
        return [record.id for record in records]
