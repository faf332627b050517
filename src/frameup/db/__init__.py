"""Database layer."""

from frameup.db.models import (
    Base,
    BatchVideoModel,
    DeliveryModel,
    EarningsReleaseModel,
    NotificationModel,
    ProjectModel,
    RevisionPaymentModel,
)
from frameup.db.session import get_session, get_session_context, init_db

__all__ = [
    "Base",
    "get_session",
    "get_session_context",
    "init_db",
    # Models
    "BatchVideoModel",
    "DeliveryModel",
    "EarningsReleaseModel",
    "NotificationModel",
    "ProjectModel",
    "RevisionPaymentModel",
]
