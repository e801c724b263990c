"""Domain models for authorization checks and RBAC fixtures.

These mirror the shape of the Kubernetes objects we read/write, but stay independent
of the `kubernetes` client classes so fakes in tests don't need the client installed.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

RBAC_API_GROUP = "rbac.authorization.k8s.io"


class BaseModelFrozen(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class GroupResource(BaseModelFrozen):
    group: str = ""
    resource: str

    @classmethod
    def parse(cls, raw: str) -> "GroupResource":
        """
        Parse the `resource.group` string form, e.g. "deployments.apps".

        No dot means the core group: "pods" -> GroupResource(group="", resource="pods").
        """
        raw = (raw or "").strip()
        if not raw:
            raise ValueError("group resource must not be empty")
        resource, _, group = raw.partition(".")
        return cls(group=group, resource=resource)

    def __str__(self) -> str:
        return f"{self.resource}.{self.group}" if self.group else self.resource


class AccessQuery(BaseModelFrozen):
    """One SubjectAccessReview question. The same instance is re-sent on every poll attempt."""

    user: str
    namespace: str = ""
    verb: str
    group: str = ""
    resource: str
    # Empty means "all resources of this type".
    name: str = ""

    @field_validator("user")
    @classmethod
    def _user_required(cls, v: str) -> str:
        if not (v or "").strip():
            raise ValueError("user must be a non-empty identity")
        return v

    @classmethod
    def for_resource(
        cls, user: str, namespace: str, verb: str, resource: GroupResource, name: str = ""
    ) -> "AccessQuery":
        return cls(
            user=user,
            namespace=namespace or "",
            verb=verb,
            group=resource.group,
            resource=resource.resource,
            name=name or "",
        )

    def describe(self) -> str:
        target = str(GroupResource(group=self.group, resource=self.resource))
        if self.name:
            target = f"{target}/{self.name}"
        scope = f"namespace {self.namespace!r}" if self.namespace else "cluster scope"
        return f"{self.user} {self.verb} {target} in {scope}"


class AccessDecision(BaseModelFrozen):
    allowed: bool
    denied: Optional[bool] = None
    reason: Optional[str] = None


class ReviewOutcome(str, Enum):
    """Result of a single poll attempt."""

    MATCHED = "matched"
    MISMATCHED = "mismatched"
    # The review endpoint doesn't exist; we can't tell, so we stop waiting.
    ENDPOINT_ABSENT = "endpoint_absent"

    @property
    def terminal(self) -> bool:
        return self is not ReviewOutcome.MISMATCHED


class Subject(BaseModelFrozen):
    kind: Literal["User", "Group", "ServiceAccount"]
    name: str
    namespace: Optional[str] = None
    api_group: Optional[str] = None

    @classmethod
    def user(cls, name: str) -> "Subject":
        return cls(kind="User", name=name, api_group=RBAC_API_GROUP)

    @classmethod
    def group(cls, name: str) -> "Subject":
        return cls(kind="Group", name=name, api_group=RBAC_API_GROUP)

    @classmethod
    def service_account(cls, namespace: str, name: str) -> "Subject":
        # ServiceAccount subjects live in the core group.
        return cls(kind="ServiceAccount", name=name, namespace=namespace, api_group="")

    def __str__(self) -> str:
        if self.namespace:
            return f"{self.kind}:{self.namespace}/{self.name}"
        return f"{self.kind}:{self.name}"


class RoleRef(BaseModelFrozen):
    kind: Literal["Role", "ClusterRole"]
    name: str
    api_group: str = RBAC_API_GROUP


class BindingSpec(BaseModelFrozen):
    """Descriptor handed to the binding-creation interface (RoleBinding or ClusterRoleBinding)."""

    name: str
    role_ref: RoleRef
    subjects: List[Subject] = Field(default_factory=list)


class CapabilityState(BaseModelFrozen):
    probed: bool = False
    enabled: bool = False
