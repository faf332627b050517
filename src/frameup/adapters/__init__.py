"""Adapters for external services."""

from frameup.adapters.notifications.base import Notifier
from frameup.adapters.payments.base import PaymentProvider

__all__ = [
    "Notifier",
    "PaymentProvider",
]
