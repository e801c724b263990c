"""Authorization helpers for e2e tests.

- poller: wait for SubjectAccessReview decisions to reflect RBAC changes
- capability: detect (once) whether RBAC is enabled
- bindings: create RoleBindings / ClusterRoleBindings as fixtures
"""
