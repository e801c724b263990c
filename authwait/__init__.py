"""Wait for Kubernetes RBAC policy changes to take effect in e2e tests."""

from authwait.authz.bindings import (
    bind_cluster_role,
    bind_cluster_role_in_namespace,
    bind_role_in_namespace,
    binding_name,
)
from authwait.authz.capability import RBACProbe, get_default_probe, is_rbac_enabled, reset_default_probe
from authwait.authz.poller import wait_for_authorization_update, wait_for_named_authorization_update
from authwait.config import DEFAULT_POLLING, PollingConfig
from authwait.core.models import AccessDecision, AccessQuery, GroupResource, ReviewOutcome, Subject
from authwait.errors import (
    AuthWaitError,
    BindingError,
    EndpointNotFoundError,
    KubernetesAPIError,
    PolicyCacheTimeoutError,
    QueryError,
    ReviewRequestError,
)
from authwait.providers.k8s_provider import DefaultK8sAuthProvider, K8sAuthProvider, get_k8s_provider

__all__ = [
    "AccessDecision",
    "AccessQuery",
    "AuthWaitError",
    "BindingError",
    "DEFAULT_POLLING",
    "DefaultK8sAuthProvider",
    "EndpointNotFoundError",
    "GroupResource",
    "K8sAuthProvider",
    "KubernetesAPIError",
    "PolicyCacheTimeoutError",
    "PollingConfig",
    "QueryError",
    "RBACProbe",
    "ReviewOutcome",
    "ReviewRequestError",
    "Subject",
    "bind_cluster_role",
    "bind_cluster_role_in_namespace",
    "bind_role_in_namespace",
    "binding_name",
    "get_default_probe",
    "get_k8s_provider",
    "is_rbac_enabled",
    "reset_default_probe",
    "wait_for_authorization_update",
    "wait_for_named_authorization_update",
]
