from __future__ import annotations

from typing import Iterable

from k8s_log_analyzer.models import PatternRule, Severity


class CatalogError(ValueError):
    pass


DEFAULT_CATALOG: tuple[PatternRule, ...] = (
    PatternRule(
        name="ImagePullBackOff",
        pattern=r"ImagePullBackOff|ErrImagePull|Failed to pull image",
        severity=Severity.ERROR,
        description="Pod cannot pull the specified container image",
        suggestions=(
            "Check if the image name and tag are correct",
            "Verify the image exists in the registry",
            "Check if you have access to the private registry",
            "Verify imagePullSecrets are configured correctly",
        ),
        docs="https://kubernetes.io/docs/concepts/containers/images/",
    ),
    PatternRule(
        name="CrashLoopBackOff",
        pattern=r"CrashLoopBackOff|Back-off restarting failed container",
        severity=Severity.ERROR,
        description="Container keeps crashing and restarting",
        suggestions=(
            "Check application logs for startup errors",
            "Verify readiness and liveness probes",
            "Check if the application exits immediately",
            "Review resource limits and requests",
            "Ensure proper signal handling in your application",
        ),
        docs="https://kubernetes.io/docs/concepts/workloads/pods/pod-lifecycle/#restart-policy",
    ),
    PatternRule(
        name="OOMKilled",
        pattern=r"OOMKilled|out of memory|killed by oom-killer",
        severity=Severity.ERROR,
        description="Container was killed due to memory limits",
        suggestions=(
            "Increase memory limits in pod spec",
            "Optimize application memory usage",
            "Check for memory leaks in your application",
            "Review memory requests vs limits",
        ),
        docs="https://kubernetes.io/docs/concepts/configuration/manage-resources-containers/",
    ),
    PatternRule(
        name="Failed Mount",
        pattern=r"MountVolume.SetUp failed|failed to mount|Unable to attach or mount volumes",
        severity=Severity.ERROR,
        description="Volume mounting failed",
        suggestions=(
            "Check if PersistentVolume exists and is available",
            "Verify StorageClass configuration",
            "Check node permissions for volume access",
            "Ensure volume is not already mounted elsewhere",
        ),
        docs="https://kubernetes.io/docs/concepts/storage/persistent-volumes/",
    ),
    PatternRule(
        name="Resource Limits",
        pattern=r"Insufficient.*resources|exceeds the maximum limit",
        severity=Severity.WARNING,
        description="Resource constraints preventing pod scheduling",
        suggestions=(
            "Check cluster resource availability",
            "Review pod resource requests and limits",
            "Consider node scaling if needed",
            "Check for resource quotas in namespace",
        ),
        docs="https://kubernetes.io/docs/concepts/policy/resource-quotas/",
    ),
    PatternRule(
        name="Readiness Probe Failed",
        pattern=r"Readiness probe failed|Liveness probe failed",
        severity=Severity.WARNING,
        description="Health check probes are failing",
        suggestions=(
            "Check if the probe endpoint is correct",
            "Verify application startup time vs probe timing",
            "Review probe configuration (path, port, headers)",
            "Check if the application is actually ready",
        ),
        docs="https://kubernetes.io/docs/tasks/configure-pod-container/configure-liveness-readiness-startup-probes/",
    ),
    PatternRule(
        name="DNS Issues",
        pattern=r"no such host|dial.*no such host|DNS resolution failed",
        severity=Severity.ERROR,
        description="DNS resolution problems",
        suggestions=(
            "Check CoreDNS pod status",
            "Verify service names and namespaces",
            "Check network policies blocking DNS",
            "Verify DNS configuration in pod spec",
        ),
        docs="https://kubernetes.io/docs/concepts/services-networking/dns-pod-service/",
    ),
    PatternRule(
        name="Permission Denied",
        pattern=r"permission denied|access denied|forbidden",
        severity=Severity.ERROR,
        description="Permission or access issues",
        suggestions=(
            "Check ServiceAccount permissions",
            "Review RBAC configuration",
            "Verify file/directory permissions",
            "Check SecurityContext settings",
        ),
        docs="https://kubernetes.io/docs/reference/access-authn-authz/rbac/",
    ),
    PatternRule(
        name="Network Issues",
        pattern=r"connection refused|network unreachable|timeout",
        severity=Severity.WARNING,
        description="Network connectivity problems",
        suggestions=(
            "Check service endpoints",
            "Verify network policies",
            "Check if target service is running",
            "Review firewall rules",
        ),
        docs="https://kubernetes.io/docs/concepts/services-networking/",
    ),
)


def find_rule(name: str, rules: Iterable[PatternRule] = DEFAULT_CATALOG) -> PatternRule | None:
    for rule in rules:
        if rule.name == name:
            return rule
    return None


def build_catalog(extra_rules: Iterable[PatternRule] = ()) -> tuple[PatternRule, ...]:
    """Return the built-in rules followed by ``extra_rules``.

    Built-in order is never changed, so issues from the default table keep
    their positions in the report whatever gets appended.
    """
    catalog = list(DEFAULT_CATALOG)
    seen = {rule.name for rule in catalog}
    for rule in extra_rules:
        if rule.name in seen:
            raise CatalogError(f"Duplicate rule name: {rule.name}")
        seen.add(rule.name)
        catalog.append(rule)
    return tuple(catalog)
