"""Detect whether RBAC is enabled on the target cluster.

The answer is computed once and reused: the first caller's provider decides the result
for every later caller of the same probe, whatever provider they pass.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from authwait.core.models import CapabilityState
from authwait.providers.k8s_provider import K8sAuthProvider

logger = logging.getLogger(__name__)


class RBACProbe:
    """Write-once RBAC detection. Concurrent first callers share a single ClusterRole listing."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = CapabilityState()

    @property
    def state(self) -> CapabilityState:
        return self._state

    def is_enabled(self, provider: K8sAuthProvider) -> bool:
        state = self._state
        if state.probed:
            return state.enabled

        with self._lock:
            if not self._state.probed:
                # Swap in a complete state object; readers never see probed=True with a stale flag.
                self._state = CapabilityState(probed=True, enabled=self._evaluate(provider))
            return self._state.enabled

    @staticmethod
    def _evaluate(provider: K8sAuthProvider) -> bool:
        try:
            crs = provider.list_cluster_roles()
        except Exception as e:
            logger.info("Error listing ClusterRoles; assuming RBAC is disabled: %s", e)
            return False
        if not crs:
            logger.info("No ClusterRoles found; assuming RBAC is disabled.")
            return False
        logger.info("Found ClusterRoles; assuming RBAC is enabled.")
        return True


_default_probe = RBACProbe()
_default_probe_lock = threading.Lock()


def get_default_probe() -> RBACProbe:
    return _default_probe


def reset_default_probe() -> RBACProbe:
    """Install a fresh process-wide probe and return it (tests use this to stay hermetic)."""
    global _default_probe
    with _default_probe_lock:
        _default_probe = RBACProbe()
        return _default_probe


def is_rbac_enabled(provider: K8sAuthProvider, *, probe: Optional[RBACProbe] = None) -> bool:
    """Return True if RBAC is enabled, using the process-wide probe unless one is passed."""
    return (probe or get_default_probe()).is_enabled(provider)
