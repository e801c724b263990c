"""Wait for the authorization policy cache to reflect an RBAC change.

RBAC updates are not visible to every authorizer instantly. After creating or removing a
binding, e2e tests call into here to block until a SubjectAccessReview returns the
decision they expect.

Known coverage gap: clusters that don't serve the SubjectAccessReview endpoint (some
managed offerings) answer 404. We can't verify anything there, so we pause once and
report ENDPOINT_ABSENT as success, even when the caller expected a denial.
"""

from __future__ import annotations

import logging
import time
from typing import Optional, Tuple, Union

from authwait.config import DEFAULT_POLLING, PollingConfig
from authwait.core.models import AccessDecision, AccessQuery, GroupResource, ReviewOutcome
from authwait.errors import EndpointNotFoundError, PolicyCacheTimeoutError, ReviewRequestError
from authwait.providers.k8s_provider import K8sAuthProvider

logger = logging.getLogger(__name__)


def monotonic() -> float:
    return time.monotonic()


def sleep(seconds: float) -> None:
    time.sleep(seconds)


def review_once(
    provider: K8sAuthProvider, query: AccessQuery, expected: bool
) -> Tuple[ReviewOutcome, Optional[AccessDecision]]:
    """
    Submit one review and classify it.

    Raises ReviewRequestError for any submission failure other than a missing endpoint.
    """
    try:
        decision = provider.create_subject_access_review(query)
    except EndpointNotFoundError:
        return ReviewOutcome.ENDPOINT_ABSENT, None
    except Exception as e:
        raise ReviewRequestError(f"SubjectAccessReview for {query.describe()} failed: {e}") from e

    if decision.allowed != expected:
        return ReviewOutcome.MISMATCHED, decision
    return ReviewOutcome.MATCHED, decision


def wait_for_authorization_update(
    provider: K8sAuthProvider,
    user: str,
    namespace: str,
    verb: str,
    resource: Union[GroupResource, str],
    allowed: bool,
    *,
    polling: Optional[PollingConfig] = None,
) -> ReviewOutcome:
    """Wait until `user` can (or cannot) perform `verb` on all `resource` objects in `namespace`."""
    return wait_for_named_authorization_update(
        provider, user, namespace, verb, "", resource, allowed, polling=polling
    )


def wait_for_named_authorization_update(
    provider: K8sAuthProvider,
    user: str,
    namespace: str,
    verb: str,
    resource_name: str,
    resource: Union[GroupResource, str],
    allowed: bool,
    *,
    polling: Optional[PollingConfig] = None,
) -> ReviewOutcome:
    """
    Wait until `user` can (or cannot) perform `verb` on the named resource.

    Args:
        namespace: "" for cluster-scoped checks
        resource_name: "" means all resources of the type
        resource: GroupResource or its "resource.group" string form
        allowed: expected decision

    Returns:
        ReviewOutcome.MATCHED, or ReviewOutcome.ENDPOINT_ABSENT when the cluster can't be asked.

    Raises:
        PolicyCacheTimeoutError: decision still differs from `allowed` at the deadline.
        ReviewRequestError: a review submission failed; raised on the first failure.
    """
    polling = polling or DEFAULT_POLLING
    if isinstance(resource, str):
        resource = GroupResource.parse(resource)
    query = AccessQuery.for_resource(user, namespace, verb, resource, name=resource_name)

    start = monotonic()
    deadline = start + polling.timeout_seconds
    attempts = 0
    while True:
        attempts += 1
        outcome, decision = review_once(provider, query, allowed)

        if outcome is ReviewOutcome.ENDPOINT_ABSENT:
            logger.info("SubjectAccessReview endpoint is missing")
            sleep(polling.missing_endpoint_pause_seconds)
            return outcome
        if outcome is ReviewOutcome.MATCHED:
            logger.debug("Authorization for %s settled after %d attempt(s)", query.describe(), attempts)
            return outcome

        now = monotonic()
        remaining = deadline - now
        if remaining <= 0:
            want = "allowed" if allowed else "denied"
            raise PolicyCacheTimeoutError(
                f"timed out after {now - start:.2f}s waiting for {query.describe()} to be {want} "
                f"({attempts} attempts)",
                query=query,
                expected=allowed,
                last_allowed=decision.allowed if decision is not None else None,
                elapsed=now - start,
            )
        logger.debug(
            "Authorization for %s is %s, want %s; retrying",
            query.describe(),
            decision.allowed if decision is not None else None,
            allowed,
        )
        sleep(min(polling.interval_seconds, remaining))
