# backend/tests/factories/__init__.py

"""
Shared test factories for the feedback backend.

These factories provide reusable test data generation for all modules.
"""

from .base import BaseFactory
from .business import BusinessFactory
from .feedback import FeedbackFactory
from .notification import NotificationFactory

__all__ = [
    'BaseFactory',
    'BusinessFactory',
    'FeedbackFactory',
    'NotificationFactory',
]
