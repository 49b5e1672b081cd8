# File: page_scout/navigation/__init__.py
"""page_scout.navigation: navigation session and response classification."""

from .classifier import TEMPORARY_STATUSES, Verdict, classify
from .session import NavigationResult, NavigationSession

__all__ = ["NavigationSession", "NavigationResult", "Verdict", "classify", "TEMPORARY_STATUSES"]
