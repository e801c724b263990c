"""
Pytest config.

Pin the repo root on sys.path so `import authwait` works even when a global `pytest`
entrypoint is used without installing the package.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, List, Optional

import pytest


def _ensure_repo_root_on_syspath() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


_ensure_repo_root_on_syspath()


@pytest.fixture(autouse=True)
def _fresh_rbac_probe():
    """
    The RBAC probe caches its answer for the whole process.

    Give every test its own probe so one test's listing result can't leak into another.
    """
    from authwait.authz.capability import reset_default_probe

    yield reset_default_probe()
    reset_default_probe()


class FakeClock:
    """Deterministic stand-in for the poller's monotonic()/sleep()."""

    def __init__(self) -> None:
        self.now = 1000.0
        self.sleeps: List[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    import authwait.authz.poller as poller_mod

    clock = FakeClock()
    monkeypatch.setattr(poller_mod, "monotonic", clock.monotonic)
    monkeypatch.setattr(poller_mod, "sleep", clock.sleep)
    return clock


class FakeAuthProvider:
    """Records calls; behaviour is scripted per test."""

    def __init__(
        self,
        *,
        decisions: Optional[List[Any]] = None,
        cluster_roles: Any = None,
        binding_error: Optional[Exception] = None,
    ) -> None:
        # Each entry is an AccessDecision, or an exception instance to raise.
        self.decisions = list(decisions or [])
        self.cluster_roles = cluster_roles if cluster_roles is not None else []
        self.binding_error = binding_error
        self.reviews: List[Any] = []
        self.list_calls = 0
        self.cluster_role_bindings: List[Any] = []
        self.role_bindings: List[Any] = []

    def create_subject_access_review(self, query):  # type: ignore[no-untyped-def]
        self.reviews.append(query)
        # Last scripted entry repeats forever.
        item = self.decisions[min(len(self.reviews), len(self.decisions)) - 1]
        if isinstance(item, Exception):
            raise item
        return item

    def list_cluster_roles(self):  # type: ignore[no-untyped-def]
        self.list_calls += 1
        if isinstance(self.cluster_roles, Exception):
            raise self.cluster_roles
        return self.cluster_roles

    def create_cluster_role_binding(self, binding) -> None:  # type: ignore[no-untyped-def]
        if self.binding_error is not None:
            raise self.binding_error
        self.cluster_role_bindings.append(binding)

    def create_namespaced_role_binding(self, namespace, binding) -> None:  # type: ignore[no-untyped-def]
        if self.binding_error is not None:
            raise self.binding_error
        self.role_bindings.append((namespace, binding))


@pytest.fixture
def make_provider():  # type: ignore[no-untyped-def]
    return FakeAuthProvider
