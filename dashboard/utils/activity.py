"""Audit trail of actions performed through the dashboard."""

from typing import Optional

from flask_login import current_user

from dashboard import db
from dashboard.models import ActivityLog


def log_activity(activity: str, user_id: Optional[int] = None) -> None:
    """Record an activity performed by a user.

    When ``user_id`` is omitted the logged-in user is used, if any.
    """
    if user_id is None:
        if current_user and not current_user.is_anonymous:
            user_id = current_user.id
    db.session.add(ActivityLog(user_id=user_id, activity=activity[:255]))
    db.session.commit()
