# === FILE: page_scout/navigation/classifier.py ===
"""
Response classification: which outcomes are worth retrying, which are final.

All functions are pure and take the status code of the last response plus
the temporary-redirect flag of the exchange that produced it.
"""
from __future__ import annotations

from enum import Flag, auto
from typing import Final, FrozenSet

__all__ = [
    "TEMPORARY_STATUSES",
    "BANDWIDTH_LIMIT_EXCEEDED",
    "Verdict",
    "classify",
    "is_temporary_result",
    "is_gone",
    "is_permanent_error",
    "is_success",
    "is_client_error",
    "is_server_error",
    "is_forbidden",
    "is_not_found",
]

TEMPORARY_STATUSES: Final[FrozenSet[int]] = frozenset(
    {
        408,  # Request Timeout
        409,  # Conflict
        419,  # Page Expired
        420,  # Enhance Your Calm
        421,  # Misdirected Request
        423,  # Locked
        425,  # Too Early
        429,  # Too Many Requests
        500,  # Internal Server Error
        502,  # Bad Gateway
        503,  # Service Unavailable
        504,  # Gateway Timeout
        507,  # Insufficient Storage
        520,  # Web Server returned an unknown error
        521,  # Web Server is down
        522,  # Connection Timed Out
        523,  # Origin is unreachable
        524,  # A timeout occurred
        525,  # SSL Handshake Failed
        527,  # Railgun Error
        529,  # Site is overloaded
        598,  # Network read timeout error
        599,  # Network Connect Timeout Error
    }
)

BANDWIDTH_LIMIT_EXCEEDED: Final[int] = 509
GONE: Final[int] = 410


class Verdict(Flag):
    """Outcome categories. Not mutually exclusive: a 410 is GONE, PERMANENT_ERROR and CLIENT_ERROR."""

    NONE = 0
    SUCCESS = auto()
    CLIENT_ERROR = auto()
    SERVER_ERROR = auto()
    TEMPORARY = auto()
    GONE = auto()
    PERMANENT_ERROR = auto()

    def names(self) -> list[str]:
        """Member names contained in this verdict, in declaration order."""
        return [m.name for m in Verdict if m.value and m in self]  # type: ignore[misc]


def is_temporary_result(status: int, uses_temporary_redirect: bool = False) -> bool:
    return uses_temporary_redirect or status in TEMPORARY_STATUSES


def is_gone(status: int, uses_temporary_redirect: bool = False) -> bool:
    # a temporary redirect outranks 410
    return status == GONE and not is_temporary_result(status, uses_temporary_redirect)


def is_permanent_error(status: int, uses_temporary_redirect: bool = False) -> bool:
    return status >= 400 and not is_temporary_result(status, uses_temporary_redirect)


def is_success(status: int) -> bool:
    return 200 <= status <= 299


def is_client_error(status: int) -> bool:
    return 400 <= status <= 499


def is_server_error(status: int) -> bool:
    return 500 <= status <= 599


def is_forbidden(status: int) -> bool:
    return status == 403


def is_not_found(status: int) -> bool:
    return status == 404


def classify(status: int, uses_temporary_redirect: bool = False) -> Verdict:
    """Combine every predicate that holds for *status* into one Verdict."""
    verdict = Verdict.NONE
    if is_success(status):
        verdict |= Verdict.SUCCESS
    if is_client_error(status):
        verdict |= Verdict.CLIENT_ERROR
    if is_server_error(status):
        verdict |= Verdict.SERVER_ERROR
    if is_temporary_result(status, uses_temporary_redirect):
        verdict |= Verdict.TEMPORARY
    if is_gone(status, uses_temporary_redirect):
        verdict |= Verdict.GONE
    if is_permanent_error(status, uses_temporary_redirect):
        verdict |= Verdict.PERMANENT_ERROR
    return verdict
