"""Kubernetes API client for SubjectAccessReviews and RBAC objects."""

import threading
from typing import Any, List, Protocol, runtime_checkable

from kubernetes import client, config
from kubernetes.client.rest import ApiException

from authwait.core.models import AccessDecision, AccessQuery, BindingSpec, Subject
from authwait.errors import EndpointNotFoundError, KubernetesAPIError

_authorization_v1_api = None
_rbac_v1_api = None
_config_loaded = False
_init_lock = threading.Lock()


@runtime_checkable
class K8sAuthProvider(Protocol):
    def create_subject_access_review(self, query: AccessQuery) -> AccessDecision: ...

    def list_cluster_roles(self) -> List[Any]: ...

    def create_cluster_role_binding(self, binding: BindingSpec) -> None: ...

    def create_namespaced_role_binding(self, namespace: str, binding: BindingSpec) -> None: ...


class DefaultK8sAuthProvider:
    def create_subject_access_review(self, query: AccessQuery) -> AccessDecision:
        return create_subject_access_review(query)

    def list_cluster_roles(self) -> List[Any]:
        return list_cluster_roles()

    def create_cluster_role_binding(self, binding: BindingSpec) -> None:
        create_cluster_role_binding(binding)

    def create_namespaced_role_binding(self, namespace: str, binding: BindingSpec) -> None:
        create_namespaced_role_binding(namespace, binding)


def get_k8s_provider() -> K8sAuthProvider:
    """Seam for swapping provider implementations (tests pass fakes directly)."""
    return DefaultK8sAuthProvider()


def _ensure_config_loaded() -> None:
    """Load in-cluster config, falling back to kubeconfig. Caller must hold `_init_lock`."""
    global _config_loaded
    if _config_loaded:
        return
    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()
    _config_loaded = True


def _get_authorization_v1():
    """
    Return a cached AuthorizationV1Api client.

    Both config loading and the API client object are cached so repeated poll
    attempts don't re-read kubeconfig.
    """
    global _authorization_v1_api

    if _authorization_v1_api is not None:
        return _authorization_v1_api

    with _init_lock:
        if _authorization_v1_api is not None:
            return _authorization_v1_api
        _ensure_config_loaded()
        _authorization_v1_api = client.AuthorizationV1Api()
        return _authorization_v1_api


def _get_rbac_v1():
    """Return a cached RbacAuthorizationV1Api client (thread-safe lazy init)."""
    global _rbac_v1_api

    if _rbac_v1_api is not None:
        return _rbac_v1_api

    with _init_lock:
        if _rbac_v1_api is not None:
            return _rbac_v1_api
        _ensure_config_loaded()
        _rbac_v1_api = client.RbacAuthorizationV1Api()
        return _rbac_v1_api


def _api_error(what: str, e: ApiException) -> KubernetesAPIError:
    return KubernetesAPIError(
        f"{what}: Kubernetes API error: {e.status} {e.reason} - {e.body}",
        status=e.status,
        reason=e.reason,
        body=e.body,
    )


def _to_rbac_subjects(subjects: List[Subject]) -> List[Any]:
    return [
        client.RbacV1Subject(
            kind=s.kind,
            name=s.name,
            namespace=s.namespace or None,
            api_group=s.api_group,
        )
        for s in subjects
    ]


def _to_role_ref(binding: BindingSpec) -> Any:
    return client.V1RoleRef(
        api_group=binding.role_ref.api_group,
        kind=binding.role_ref.kind,
        name=binding.role_ref.name,
    )


def create_subject_access_review(query: AccessQuery) -> AccessDecision:
    """
    Submit a SubjectAccessReview and return the decision.

    Raises:
        EndpointNotFoundError: the cluster doesn't serve the review endpoint (404).
        KubernetesAPIError: any other API failure.
    """
    body = client.V1SubjectAccessReview(
        spec=client.V1SubjectAccessReviewSpec(
            user=query.user,
            # Kubernetes treats omitted and empty fields the same; omit empties like kubectl does.
            resource_attributes=client.V1ResourceAttributes(
                group=query.group or None,
                verb=query.verb,
                resource=query.resource,
                namespace=query.namespace or None,
                name=query.name or None,
            ),
        )
    )
    try:
        resp = _get_authorization_v1().create_subject_access_review(body=body)
    except ApiException as e:
        if e.status == 404:
            raise EndpointNotFoundError(
                "SubjectAccessReview endpoint not found", status=e.status, reason=e.reason, body=e.body
            ) from e
        raise _api_error("Failed to create SubjectAccessReview", e) from e

    status = getattr(resp, "status", None)
    denied = getattr(status, "denied", None)
    reason = getattr(status, "reason", None)
    return AccessDecision(
        allowed=getattr(status, "allowed", False) is True,
        denied=denied if isinstance(denied, bool) else None,
        reason=reason if isinstance(reason, str) and reason else None,
    )


def list_cluster_roles() -> List[Any]:
    """
    List ClusterRoles (read-only).

    Only emptiness matters to callers, so a single item is requested.
    """
    try:
        crs = _get_rbac_v1().list_cluster_role(limit=1)
    except ApiException as e:
        raise _api_error("Failed to list ClusterRoles", e) from e
    if crs is None:
        return []
    return list(crs.items or [])


def create_cluster_role_binding(binding: BindingSpec) -> None:
    body = client.V1ClusterRoleBinding(
        metadata=client.V1ObjectMeta(name=binding.name),
        role_ref=_to_role_ref(binding),
        subjects=_to_rbac_subjects(binding.subjects),
    )
    try:
        _get_rbac_v1().create_cluster_role_binding(body=body)
    except ApiException as e:
        raise _api_error(f"Failed to create ClusterRoleBinding {binding.name}", e) from e


def create_namespaced_role_binding(namespace: str, binding: BindingSpec) -> None:
    if not namespace:
        raise ValueError("RoleBinding namespace required")
    body = client.V1RoleBinding(
        metadata=client.V1ObjectMeta(name=binding.name, namespace=namespace),
        role_ref=_to_role_ref(binding),
        subjects=_to_rbac_subjects(binding.subjects),
    )
    try:
        _get_rbac_v1().create_namespaced_role_binding(namespace=namespace, body=body)
    except ApiException as e:
        raise _api_error(f"Failed to create RoleBinding {namespace}/{binding.name}", e) from e
