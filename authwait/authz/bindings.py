"""Create RBAC bindings as e2e test fixtures.

Binding names are derived from (namespace, role). Test namespaces are unique per run,
so bindings are left in place rather than cleaned up, and we never race a cache on
delete/recreate. When RBAC is disabled every call is a no-op.
"""

from __future__ import annotations

import logging
from typing import Literal, Optional

from authwait.authz.capability import RBACProbe, is_rbac_enabled
from authwait.core.models import BindingSpec, RoleRef, Subject
from authwait.errors import BindingError
from authwait.providers.k8s_provider import K8sAuthProvider

logger = logging.getLogger(__name__)


def binding_name(namespace: str, role: str) -> str:
    return f"{namespace}--{role}"


def _subjects_repr(subjects: tuple) -> str:
    return "[" + " ".join(str(s) for s in subjects) + "]"


def bind_cluster_role(
    provider: K8sAuthProvider,
    cluster_role: str,
    namespace: str,
    *subjects: Subject,
    probe: Optional[RBACProbe] = None,
) -> None:
    """Bind `cluster_role` at cluster scope. If RBAC is not enabled, nothing is created."""
    if not is_rbac_enabled(provider, probe=probe):
        logger.info("RBAC disabled; skipping ClusterRoleBinding for clusterrole/%s", cluster_role)
        return

    spec = BindingSpec(
        name=binding_name(namespace, cluster_role),
        role_ref=RoleRef(kind="ClusterRole", name=cluster_role),
        subjects=list(subjects),
    )
    try:
        provider.create_cluster_role_binding(spec)
    except Exception as e:
        raise BindingError(
            f"binding clusterrole/{cluster_role} for {namespace!r} for {_subjects_repr(subjects)}: {e}"
        ) from e
    logger.info("Created ClusterRoleBinding %s", spec.name)


def bind_cluster_role_in_namespace(
    provider: K8sAuthProvider,
    cluster_role: str,
    namespace: str,
    *subjects: Subject,
    probe: Optional[RBACProbe] = None,
) -> None:
    """Bind `cluster_role` inside `namespace` only. If RBAC is not enabled, nothing is created."""
    _bind_in_namespace(provider, "ClusterRole", cluster_role, namespace, subjects, probe)


def bind_role_in_namespace(
    provider: K8sAuthProvider,
    role: str,
    namespace: str,
    *subjects: Subject,
    probe: Optional[RBACProbe] = None,
) -> None:
    """Bind the namespaced `role` inside `namespace`. If RBAC is not enabled, nothing is created."""
    _bind_in_namespace(provider, "Role", role, namespace, subjects, probe)


def _bind_in_namespace(
    provider: K8sAuthProvider,
    role_kind: Literal["Role", "ClusterRole"],
    role: str,
    namespace: str,
    subjects: tuple,
    probe: Optional[RBACProbe],
) -> None:
    if not is_rbac_enabled(provider, probe=probe):
        logger.info("RBAC disabled; skipping RoleBinding for %s/%s in %s", role_kind, role, namespace)
        return

    spec = BindingSpec(
        name=binding_name(namespace, role),
        role_ref=RoleRef(kind=role_kind, name=role),
        subjects=list(subjects),
    )
    try:
        provider.create_namespaced_role_binding(namespace, spec)
    except Exception as e:
        raise BindingError(
            f"binding {role_kind}/{role} into {namespace!r} for {_subjects_repr(subjects)}: {e}"
        ) from e
    logger.info("Created RoleBinding %s/%s", namespace, spec.name)
