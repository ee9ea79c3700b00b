"""
Network egress executors: network rules and external access integrations.

An external access integration references its network rules by qualified
name, so the rules must be declared as dependencies of the integration.
"""

from typing import List

from snowkit.models import ResourceKind, ResourceSpec, normalize_identifier

from .base import BaseExecutor

NETWORK_RULE_MODES = frozenset({"INGRESS", "INTERNAL_STAGE", "EGRESS", "POSTGRES_INGRESS", "POSTGRES_EGRESS"})
NETWORK_RULE_TYPES = frozenset({"IPV4", "AWSVPCEID", "AZURELINKID", "GCPPSCID", "HOST_PORT", "PRIVATE_HOST_PORT"})


class NetworkRuleExecutor(BaseExecutor):
    """Executor for network rules."""

    kind = ResourceKind.NETWORK_RULE

    def _validate_options(self, resource: ResourceSpec) -> List[str]:
        errors = []
        mode = resource.option("MODE")
        if mode is None or str(mode).upper() not in NETWORK_RULE_MODES:
            errors.append(f"Network rule {resource.name} needs MODE, one of {sorted(NETWORK_RULE_MODES)}")
        rule_type = resource.option("TYPE")
        if rule_type is None or str(rule_type).upper() not in NETWORK_RULE_TYPES:
            errors.append(f"Network rule {resource.name} needs TYPE, one of {sorted(NETWORK_RULE_TYPES)}")
        values = resource.option("VALUE_LIST")
        if not values or not isinstance(values, list):
            errors.append(f"Network rule {resource.name} needs a non-empty VALUE_LIST")
        return errors


class ExternalAccessIntegrationExecutor(BaseExecutor):
    """Executor for external access integrations."""

    kind = ResourceKind.EXTERNAL_ACCESS_INTEGRATION

    def _validate_options(self, resource: ResourceSpec) -> List[str]:
        rules = resource.option("ALLOWED_NETWORK_RULES")
        if not rules or not isinstance(rules, list):
            return [f"Integration {resource.name} needs a non-empty ALLOWED_NETWORK_RULES list"]

        deps = {normalize_identifier(d) for d in resource.depends_on}
        return [
            f"Integration {resource.name} must depend on its network rule {rule}"
            for rule in rules
            if normalize_identifier(rule) not in deps
        ]
