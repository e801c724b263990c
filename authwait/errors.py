"""Exception types raised by authwait.

Two failure families are kept apart on purpose so callers can tell them apart:
- PolicyCacheTimeoutError: the cluster answered, but never with the expected decision.
- QueryError: we could not ask (submission/creation failed).
"""

from __future__ import annotations

from typing import Any, Optional


class AuthWaitError(Exception):
    """Base class for all authwait errors."""


class KubernetesAPIError(AuthWaitError):
    """A Kubernetes API call failed (raised by the default provider)."""

    def __init__(self, message: str, *, status: Optional[int] = None, reason: Optional[str] = None, body: Any = None):
        super().__init__(message)
        self.status = status
        self.reason = reason
        self.body = body


class EndpointNotFoundError(KubernetesAPIError):
    """The SubjectAccessReview endpoint is not served by this cluster (HTTP 404)."""


class QueryError(AuthWaitError):
    """An external interface (review, listing, creation) failed. Never retried."""


class ReviewRequestError(QueryError):
    pass


class BindingError(QueryError):
    pass


class PolicyCacheTimeoutError(AuthWaitError):
    """The authorization decision did not match the expected value before the deadline."""

    def __init__(self, message: str, *, query: Any, expected: bool, last_allowed: Optional[bool], elapsed: float):
        super().__init__(message)
        self.query = query
        self.expected = expected
        self.last_allowed = last_allowed
        self.elapsed = elapsed
