from .slide_type import SlideType
from .error_kind import ClassifiedError, ErrorKind
from .provider_status import CostTier, ProviderStatus

__all__ = [
    "SlideType",
    "ErrorKind",
    "ClassifiedError",
    "CostTier",
    "ProviderStatus",
]
