# page_scout/__init__.py
"""
PageScout package initializer.
Defines package version and exposes the navigation API.
"""
__version__ = "0.1.0"

from page_scout.errors import (
    AssetFetchError,
    LinkNotFound,
    MalformedResponse,
    PageScoutError,
    PrematureAccess,
    TransportFailure,
)
from page_scout.navigation.classifier import TEMPORARY_STATUSES, Verdict, classify
from page_scout.navigation.session import NavigationResult, NavigationSession

__all__ = [
    "__version__",
    "NavigationSession",
    "NavigationResult",
    "Verdict",
    "classify",
    "TEMPORARY_STATUSES",
    "PageScoutError",
    "PrematureAccess",
    "LinkNotFound",
    "TransportFailure",
    "MalformedResponse",
    "AssetFetchError",
]
