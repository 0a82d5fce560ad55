"""Utility helpers shared across the test-suite."""

from __future__ import annotations

import re
from typing import Any

_CSRF_RE = re.compile(r'name=["\']csrf_token["\'][^>]*value=["\']([^"\']+)["\']', re.IGNORECASE)


def extract_csrf_token(response: Any, *, required: bool = True) -> str:
    """Return the first CSRF token found in ``response`` HTML content."""

    if hasattr(response, "data"):
        html: str = response.data.decode("utf-8")
    else:
        html = str(response)
    match = _CSRF_RE.search(html)
    if not match:
        if required:
            raise AssertionError("CSRF token not found in response")
        return ""
    return match.group(1)


def login(client, email: str, password: str, **kwargs):
    """Helper to login a user in tests, respecting CSRF protection."""

    login_page = client.get("/login")
    token = extract_csrf_token(login_page, required=False)
    form_data = {"email": email, "password": password}
    if token:
        form_data["csrf_token"] = token
    return client.post("/login", data=form_data, **kwargs)


class FakeInvoiceStore:
    """Records every statement instead of touching a database."""

    def __init__(self, error: Exception | None = None, rowcount: int = 1):
        self.error = error
        self.rowcount = rowcount
        self.calls: list[tuple] = []

    def insert(self, customer_id, amount, status, invoice_date):
        self.calls.append(("insert", customer_id, amount, status, invoice_date))
        self._raise_if_configured()
        return "generated-id"

    def update(self, invoice_id, customer_id, amount, status):
        self.calls.append(("update", invoice_id, customer_id, amount, status))
        self._raise_if_configured()
        return self.rowcount

    def delete(self, invoice_id):
        self.calls.append(("delete", invoice_id))
        self._raise_if_configured()
        return self.rowcount

    def _raise_if_configured(self):
        if self.error is not None:
            raise self.error


class FakeRouteCache:
    def __init__(self):
        self.invalidated: list[str] = []

    def invalidate(self, path):
        self.invalidated.append(path)


class FakeAuthProvider:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[tuple] = []

    def sign_in(self, provider, credentials):
        self.calls.append((provider, credentials))
        if self.error is not None:
            raise self.error
