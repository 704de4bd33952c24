"""
Provider availability and pricing value objects.
"""

from enum import Enum


class ProviderStatus(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    QUOTA_EXCEEDED = "quota_exceeded"


class CostTier(str, Enum):
    FREE = "free"
    PAID = "paid"
