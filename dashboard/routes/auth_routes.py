from urllib.parse import urlparse

from flask import (
    Blueprint,
    current_app,
    redirect,
    render_template,
    request,
    url_for,
)
from flask_login import current_user, login_required, logout_user

from dashboard import limiter
from dashboard.forms import LoginForm
from dashboard.utils.activity import log_activity

auth = Blueprint("auth", __name__)


def _is_safe_redirect(target):
    """Allow only same-site relative paths as post-login destinations."""
    if not target:
        return False
    parsed = urlparse(target)
    return (
        not parsed.scheme
        and not parsed.netloc
        and target.startswith("/")
        and not target.startswith("//")
    )


@auth.route("/login", methods=["GET", "POST"])
@limiter.limit("5 per minute")
def login():
    """Authenticate a user and start their session."""
    if request.method == "POST":
        actions = current_app.extensions["invoice_actions"]
        error = actions.authenticate(request.form)
        if error is None:
            target = request.args.get("next")
            if not _is_safe_redirect(target):
                target = url_for("invoice.view_invoices")
            return redirect(target)
        form = LoginForm(formdata=request.form)
        return (
            render_template(
                "auth/login.html",
                form=form,
                error=error,
                demo=current_app.config["DEMO"],
            ),
            401,
        )

    if current_user.is_authenticated:
        return redirect(url_for("invoice.view_invoices"))
    return render_template(
        "auth/login.html",
        form=LoginForm(),
        error=None,
        demo=current_app.config["DEMO"],
    )


@auth.route("/logout")
@login_required
def logout():
    """Log the current user out."""
    user_id = current_user.id
    logout_user()
    log_activity("Logged out", user_id)
    return redirect(url_for("auth.login"))
