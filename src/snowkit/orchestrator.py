"""
Resource lifecycle orchestrator.

Runs the two lifecycle phases over a set of ResourceSpecs:

    teardown   reverse dependency order; owners that spawn dynamically-named
               dependents have those discovered and dropped first
    provision  forward dependency order; a failed spec skips its transitive
               dependents while independent branches continue

and wires published notebook artifacts into notebook objects. Every
operation is delegated to the executor registered for the spec's kind and
comes back as an OperationOutcome; only ConfigurationError is raised, and
always before the first operation touches the account.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from snowkit.client.base import ResourceClient
from snowkit.config import OrchestratorSettings
from snowkit.errors import ConfigurationError, ResourceNotFoundError, classify_error, describe_error
from snowkit.executors import DEFAULT_EXECUTORS, BaseExecutor
from snowkit.graph import DependencyGraph
from snowkit.models import (
    ArtifactRef,
    DependentResourceQuery,
    ErrorKind,
    ExecutionPlan,
    OperationOutcome,
    OperationType,
    OutcomeStatus,
    ResourceKind,
    ResourceSpec,
    as_identifier,
    qualify,
)

logger = logging.getLogger(__name__)


class Orchestrator:
    """
    Ordered create and cleanup of managed resources.

    Usage:
        orchestrator = Orchestrator(SnowparkResourceClient(session), config.orchestrator)

        orchestrator.teardown(rerun_cleanup_specs(config))
        outcomes = orchestrator.provision(structural_specs(config))
        ...
        orchestrator.attach_artifacts(notebook_specs(config), published)

    Args:
        client: Resource management API; plans never call it, so a dry run
            can pass None
        settings: Retry settings; defaults to OrchestratorSettings()
        executors: Executor instances overriding the defaults per kind

    Raises:
        ConfigurationError: If an executor discovers dependents of a kind
            whose own executor discovers dependents (nested discovery)
    """

    def __init__(
        self,
        client: Optional[ResourceClient],
        settings: Optional[OrchestratorSettings] = None,
        executors: Optional[Mapping[ResourceKind, BaseExecutor]] = None,
    ):
        self.client = client
        self.settings = settings or OrchestratorSettings()
        self.executors: Dict[ResourceKind, BaseExecutor] = {
            kind: executor_class(client, max_retries=self.settings.max_retries)
            for kind, executor_class in DEFAULT_EXECUTORS.items()
        }
        if executors:
            self.executors.update(executors)
        self._check_discovery_depth()

    def _check_discovery_depth(self) -> None:
        for kind, executor in self.executors.items():
            candidate = executor.discovers
            if candidate is None:
                continue
            candidate_executor = self.executors.get(candidate)
            if candidate_executor is None:
                raise ConfigurationError(
                    f"{kind.value} discovers {candidate.value} dependents but no executor handles {candidate.value}"
                )
            if candidate_executor.discovers is not None:
                raise ConfigurationError(
                    f"Nested discovery is not supported: {kind.value} discovers {candidate.value}, "
                    f"which itself discovers {candidate_executor.discovers.value}"
                )

    def _executor(self, kind: ResourceKind) -> BaseExecutor:
        try:
            return self.executors[kind]
        except KeyError:
            raise ConfigurationError(f"No executor registered for {kind.value}") from None

    def validate(self, specs: Sequence[ResourceSpec], strict: bool = True) -> DependencyGraph:
        """
        Check a set of specs before any operation runs.

        Builds the dependency graph (cycles, duplicates and, when strict,
        unknown dependencies) and runs every executor's spec validation.

        Returns:
            The validated DependencyGraph

        Raises:
            ConfigurationError: Listing every problem found
        """
        graph = DependencyGraph(specs, strict=strict)
        errors: List[str] = []
        for spec in specs:
            errors.extend(self._executor(spec.kind).validate(spec))
        if errors:
            raise ConfigurationError("Invalid resource declarations:\n  " + "\n  ".join(errors))
        return graph

    # =========================================================================
    # TEARDOWN
    # =========================================================================

    def teardown(self, specs: Iterable[ResourceSpec]) -> List[OperationOutcome]:
        """
        Drop resources in reverse dependency order.

        Dependencies on resources outside the given set are ignored for
        ordering, so any subset of the declared resources can be torn down.
        Dropping an absent resource is a successful no-op.

        Returns:
            Outcomes in execution order; discovered dependents precede their owner
        """
        specs = list(specs)
        graph = self.validate(specs, strict=False)

        logger.info(f"Teardown: {len(specs)} resource(s)")
        outcomes: List[OperationOutcome] = []
        for spec in graph.reverse_order():
            outcomes.extend(self._teardown_one(spec))
        return outcomes

    def _teardown_one(self, spec: ResourceSpec) -> List[OperationOutcome]:
        executor = self._executor(spec.kind)
        query = executor.dependent_query(spec)
        if query is None:
            return [executor.delete(spec)]

        outcomes, blocked = self._clean_dependents(query)
        if blocked:
            outcomes.append(self._blocked_outcome(spec, blocked))
            return outcomes

        owner = executor.delete(spec)
        if owner.error_kind == ErrorKind.DEPENDENCY_BLOCKED:
            # Dependents spawned between discovery and the drop; look once more
            logger.warning(f"{spec.name} still has dependents, rediscovering once")
            retry_outcomes, blocked = self._clean_dependents(query)
            outcomes.extend(retry_outcomes)
            if blocked:
                outcomes.append(self._blocked_outcome(spec, blocked))
                return outcomes
            first_attempt = owner.message
            owner = executor.delete(spec)
            owner.changes["first_attempt"] = first_attempt

        outcomes.append(owner)
        return outcomes

    def _clean_dependents(self, query: DependentResourceQuery) -> Tuple[List[OperationOutcome], int]:
        """
        Discover and drop the dependents described by a query.

        Returns:
            (outcomes, number of dependents that could not be dropped)
        """
        candidate_executor = self._executor(query.candidate_kind)
        try:
            records = self._discover_dependents(query)
        except Exception as e:
            failed = _failed_outcome(OperationType.DISCOVER, query.candidate_kind, query.owner_name, e)
            return [failed], 1

        outcomes = [OperationOutcome(
            target=query.owner_name,
            status=OutcomeStatus.SUCCESS,
            operation=OperationType.DISCOVER,
            resource_kind=query.candidate_kind.value,
            message=f"Found {len(records)} dependent {query.candidate_kind.value.lower()}(s)",
        )]

        failures = 0
        for record in records:
            try:
                dependent = self._dependent_spec(query, record)
            except Exception as e:
                label = str(self.client.get_attribute(record, "name") or record)
                outcome = _failed_outcome(OperationType.DELETE, query.candidate_kind, label, e)
            else:
                outcome = candidate_executor.delete(dependent)
            if outcome.failed:
                logger.warning(f"Could not drop dependent of {query.owner_name}: {outcome}")
                failures += 1
            outcomes.append(outcome)
        return outcomes, failures

    def _discover_dependents(self, query: DependentResourceQuery) -> List[Mapping[str, Any]]:
        """
        List candidates in the owner's scope and keep those that point back at the owner.

        Discovery always asks the account; nothing is cached between calls.
        A scope that does not exist has no dependents.
        """
        executor = self._executor(query.candidate_kind)
        try:
            records = executor.execute_with_retry(self.client.list_in_scope, query.candidate_kind, query.scope)
        except ResourceNotFoundError:
            logger.debug(f"Scope {query.scope} does not exist; no dependents of {query.owner_name}")
            return []

        matches = [r for r in records if query.matches(r, self.client.get_attribute)]
        logger.info(
            f"Discovered {len(matches)} {query.candidate_kind.value.lower()}(s) "
            f"managed by {query.owner_name}"
        )
        return matches

    def _dependent_spec(self, query: DependentResourceQuery, record: Mapping[str, Any]) -> ResourceSpec:
        name = self.client.get_attribute(record, "name")
        if not name:
            raise ConfigurationError(f"Listed {query.candidate_kind.value} record has no name: {record}")

        database = self.client.get_attribute(record, "database_name")
        schema = self.client.get_attribute(record, "schema_name")
        scope = query.scope
        if database and schema:
            scope = f"{as_identifier(str(database))}.{as_identifier(str(schema))}"

        return ResourceSpec(
            kind=query.candidate_kind,
            name=qualify(scope, as_identifier(str(name))),
            provisioned=False,
        )

    def _blocked_outcome(self, spec: ResourceSpec, blocked: int) -> OperationOutcome:
        message = f"Not dropped: {blocked} dependent(s) could not be deleted"
        logger.warning(f"{spec.name}: {message}")
        return OperationOutcome(
            target=spec.name,
            status=OutcomeStatus.FAILED,
            operation=OperationType.DELETE,
            resource_kind=spec.kind.value,
            message=message,
            error_detail=message,
            error_kind=ErrorKind.DEPENDENCY_BLOCKED,
        )

    # =========================================================================
    # PROVISION
    # =========================================================================

    def provision(self, specs: Iterable[ResourceSpec]) -> List[OperationOutcome]:
        """
        Create resources in dependency order.

        A failed create skips every transitive dependent; independent branches
        continue. Failures of prerequisite kinds (role, database, schema) and
        any permission failure are marked fatal.

        Raises:
            ConfigurationError: On a cyclic, duplicated or dangling declaration
        """
        specs = list(specs)
        graph = self.validate(specs, strict=True)

        logger.info(f"Provision: {len(specs)} resource(s)")
        outcomes: List[OperationOutcome] = []
        blocked_by: Dict[str, str] = {}

        for spec in graph.order():
            if spec.key in blocked_by:
                outcomes.append(OperationOutcome(
                    target=spec.name,
                    status=OutcomeStatus.SKIPPED,
                    operation=OperationType.CREATE,
                    resource_kind=spec.kind.value,
                    message=f"Skipped: depends on failed {blocked_by[spec.key]}",
                ))
                continue

            results = self._executor(spec.kind).provision(spec)
            created = results[0]
            for outcome in results:
                if outcome.error_kind == ErrorKind.PERMISSION_DENIED:
                    outcome.fatal = True

            if created.failed:
                if spec.kind.is_prerequisite:
                    created.fatal = True
                dependents: Set[str] = graph.transitive_dependents(spec.name)
                for key in dependents:
                    blocked_by.setdefault(key, spec.name)
                if dependents:
                    logger.warning(f"{spec.name} failed; skipping {len(dependents)} dependent resource(s)")

            outcomes.extend(results)

        return outcomes

    # =========================================================================
    # ATTACH
    # =========================================================================

    def attach_artifacts(
        self,
        notebook_specs: Iterable[ResourceSpec],
        published: Sequence[ArtifactRef],
    ) -> List[OperationOutcome]:
        """
        Create each notebook from the published artifact named by its MAIN_FILE.

        Args:
            notebook_specs: NOTEBOOK specs, attached in the given order
            published: Artifacts the sync pipeline published successfully

        Raises:
            ConfigurationError: If a spec is not a notebook
        """
        specs = self._notebook_specs(notebook_specs)

        by_file: Dict[str, ArtifactRef] = {}
        for ref in published:
            by_file.setdefault(ref.file_name, ref)

        outcomes: List[OperationOutcome] = []
        for spec in specs:
            main_file = spec.option("MAIN_FILE")
            artifact = by_file.get(main_file)
            if artifact is None:
                logger.warning(f"No published artifact {main_file} for notebook {spec.name}")
                outcomes.append(OperationOutcome(
                    target=spec.name,
                    status=OutcomeStatus.SKIPPED,
                    operation=OperationType.ATTACH,
                    resource_kind=spec.kind.value,
                    message=f"Skipped: {main_file} was not published",
                ))
                continue
            outcomes.append(self._executor(spec.kind).attach(spec, artifact))
        return outcomes

    def _notebook_specs(self, specs: Iterable[ResourceSpec]) -> List[ResourceSpec]:
        specs = list(specs)
        others = [s.name for s in specs if s.kind != ResourceKind.NOTEBOOK]
        if others:
            raise ConfigurationError(f"Only notebooks can be attached to artifacts, got {', '.join(others)}")
        self.validate(specs, strict=False)
        return specs

    # =========================================================================
    # PLANS
    # =========================================================================

    def plan_teardown(self, specs: Iterable[ResourceSpec]) -> ExecutionPlan:
        """Operations teardown would attempt, without touching the account."""
        specs = list(specs)
        graph = self.validate(specs, strict=False)

        plan = ExecutionPlan(title="Teardown Plan")
        for spec in graph.reverse_order():
            query = self._executor(spec.kind).dependent_query(spec)
            if query is not None:
                plan.add_operation(
                    OperationType.DISCOVER,
                    query.candidate_kind.value,
                    spec.name,
                    {"scope": query.scope, "match": f"{query.match_attribute} = {spec.name}"},
                )
            plan.add_operation(OperationType.DELETE, spec.kind.value, spec.name)
        return plan

    def plan_provision(self, specs: Iterable[ResourceSpec]) -> ExecutionPlan:
        """Operations provision would attempt, without touching the account."""
        specs = list(specs)
        graph = self.validate(specs, strict=True)

        plan = ExecutionPlan(title="Provision Plan")
        for spec in graph.order():
            if not spec.provisioned:
                plan.add_operation(OperationType.NO_OP, spec.kind.value, spec.name)
                continue
            plan.add_operation(
                OperationType.CREATE,
                spec.kind.value,
                spec.name,
                {"mode": spec.create_mode.value},
            )
            for grant in spec.grants:
                plan.add_operation(
                    OperationType.GRANT,
                    spec.kind.value,
                    f"{spec.name} -> {grant.role}",
                    {"privileges": ", ".join(grant.privileges)},
                )
        return plan

    def plan_attach(self, notebook_specs: Iterable[ResourceSpec]) -> ExecutionPlan:
        """Notebooks attach_artifacts would create once their files are published."""
        plan = ExecutionPlan(title="Attach Plan")
        for spec in self._notebook_specs(notebook_specs):
            plan.add_operation(
                OperationType.ATTACH,
                spec.kind.value,
                spec.name,
                {"main_file": spec.option("MAIN_FILE")},
            )
        return plan


def _failed_outcome(
    operation: OperationType,
    kind: ResourceKind,
    target: str,
    error: Exception,
) -> OperationOutcome:
    detail = describe_error(error)
    outcome = OperationOutcome(
        target=target,
        status=OutcomeStatus.FAILED,
        operation=operation,
        resource_kind=kind.value,
        message=detail,
        error_detail=detail,
        error_kind=classify_error(error),
    )
    logger.error(f"Operation failed: {outcome}")
    return outcome
