from typing import Any, Mapping

from flask_login import login_user
from werkzeug.security import check_password_hash

from dashboard.forms import LoginForm, as_formdata
from dashboard.models import User
from dashboard.utils.activity import log_activity


class AuthError(Exception):
    """Structured sign-in failure. ``type`` names the failure kind."""

    type = "AuthError"

    def __init__(self, message=None):
        super().__init__(message or self.type)


class CredentialsSignin(AuthError):
    """The submitted email/password pair was rejected."""

    type = "CredentialsSignin"


class AccessDenied(AuthError):
    type = "AccessDenied"


class InvalidProvider(AuthError):
    type = "InvalidProvider"


class CredentialsProvider:
    """Email and password sign-in against the ``User`` table."""

    name = "credentials"

    def sign_in(self, provider: str, credentials: Mapping[str, Any]) -> None:
        if provider != self.name:
            raise InvalidProvider(f"Unknown sign-in provider {provider!r}")

        form = LoginForm(formdata=as_formdata(credentials))
        if not form.validate():
            raise CredentialsSignin()

        user = User.query.filter_by(email=form.email.data).first()
        if user is None or not check_password_hash(
            user.password, form.password.data
        ):
            raise CredentialsSignin()
        if not user.active:
            raise AccessDenied("Please contact system admin to activate account.")

        login_user(user)
        log_activity("Logged in", user.id)
