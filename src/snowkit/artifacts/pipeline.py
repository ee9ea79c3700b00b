"""
Artifact sync pipeline.

Fetches a fixed list of artifacts and publishes each into a stage. Items are
processed one at a time, in order, with a single attempt each; a failure is
recorded as that item's outcome and the next item proceeds. The pipeline
itself never raises.
"""

import hashlib
import logging
import time
from typing import Callable, Dict, List, Optional, Sequence

from snowkit.config import SyncSettings
from snowkit.errors import (
    ArtifactIntegrityError,
    ConfigurationError,
    ResourceNotFoundError,
    classify_error,
    describe_error,
)
from snowkit.models import ArtifactRef, OperationOutcome, OperationType, OutcomeStatus

logger = logging.getLogger(__name__)

RESOURCE_KIND = "ARTIFACT"

Fetch = Callable[[str, float], bytes]
Publish = Callable[[str, bytes], None]
ListFiles = Callable[[str], List[str]]


class ArtifactSyncPipeline:
    """
    Fetch-and-publish over a list of ArtifactRefs.

    Usage:
        pipeline = ArtifactSyncPipeline(config.sync)
        outcomes = pipeline.run(refs, HttpFetcher(), StageStore(session))
        verified = pipeline.verify(refs, outcomes, StageStore(session).list)
        published = pipeline.published(refs, verified)
    """

    def __init__(self, settings: Optional[SyncSettings] = None):
        self.settings = settings or SyncSettings()

    def run(self, refs: Sequence[ArtifactRef], fetch: Fetch, publish: Publish) -> List[OperationOutcome]:
        """
        Fetch and publish every ref.

        Args:
            refs: Artifacts in reporting order
            fetch: Callable (url, timeout_seconds) -> bytes
            publish: Callable (destination_path, bytes) -> None, overwriting

        Returns:
            One outcome per ref, in input order
        """
        logger.info(f"Syncing {len(refs)} artifact(s)")
        outcomes = [self._sync_one(ref, fetch, publish) for ref in refs]

        failed = sum(1 for o in outcomes if o.failed)
        if failed:
            logger.warning(f"{failed} of {len(refs)} artifact(s) failed to sync")
        return outcomes

    def _sync_one(self, ref: ArtifactRef, fetch: Fetch, publish: Publish) -> OperationOutcome:
        start_time = time.time()
        timeout = self.settings.fetch_timeout_seconds

        try:
            data = fetch(ref.source_url, timeout)
        except Exception as e:
            return self._failed(ref, OperationType.FETCH, e, start_time)

        if not ref.matches_content(data):
            error = ArtifactIntegrityError(
                f"{ref.source_url} has sha256 {hashlib.sha256(data).hexdigest()}, expected {ref.content_hash}"
            )
            return self._failed(ref, OperationType.FETCH, error, start_time)

        try:
            publish(ref.destination_path, data)
        except Exception as e:
            return self._failed(ref, OperationType.PUBLISH, e, start_time)

        logger.info(f"Published {ref.file_name} to {ref.stage_location}")
        return OperationOutcome(
            target=ref.destination_path,
            status=OutcomeStatus.SUCCESS,
            operation=OperationType.PUBLISH,
            resource_kind=RESOURCE_KIND,
            message=f"Published {len(data)} bytes",
            duration_seconds=time.time() - start_time,
            changes={"bytes": len(data), "sha256": hashlib.sha256(data).hexdigest()},
        )

    def verify(
        self,
        refs: Sequence[ArtifactRef],
        outcomes: Sequence[OperationOutcome],
        list_files: ListFiles,
    ) -> List[OperationOutcome]:
        """
        Check that every published file shows up in a listing of its stage.

        Refs that were not published get a SKIPPED outcome, so the result
        lines up with refs.

        Raises:
            ConfigurationError: If refs and outcomes do not line up
        """
        _check_aligned(refs, outcomes)
        listings: Dict[str, List[str]] = {}
        results: List[OperationOutcome] = []

        for ref, outcome in zip(refs, outcomes):
            if not outcome.success:
                results.append(OperationOutcome(
                    target=ref.destination_path,
                    status=OutcomeStatus.SKIPPED,
                    operation=OperationType.VERIFY,
                    resource_kind=RESOURCE_KIND,
                    message="Skipped: not published",
                ))
                continue

            start_time = time.time()
            try:
                if ref.stage_location not in listings:
                    listings[ref.stage_location] = list_files(ref.stage_location)
                if ref.file_name not in listings[ref.stage_location]:
                    raise ResourceNotFoundError(
                        ref.destination_path, f"{ref.file_name} is not listed in {ref.stage_location}"
                    )
            except Exception as e:
                results.append(self._failed(ref, OperationType.VERIFY, e, start_time))
                continue

            results.append(OperationOutcome(
                target=ref.destination_path,
                status=OutcomeStatus.SUCCESS,
                operation=OperationType.VERIFY,
                resource_kind=RESOURCE_KIND,
                message=f"Listed in {ref.stage_location}",
                duration_seconds=time.time() - start_time,
            ))
        return results

    def published(self, refs: Sequence[ArtifactRef], outcomes: Sequence[OperationOutcome]) -> List[ArtifactRef]:
        """Refs whose publish (or verification) outcome succeeded, in input order."""
        _check_aligned(refs, outcomes)
        return [
            ref for ref, outcome in zip(refs, outcomes)
            if outcome.success and outcome.operation in (OperationType.PUBLISH, OperationType.VERIFY)
        ]

    def _failed(
        self,
        ref: ArtifactRef,
        operation: OperationType,
        error: Exception,
        start_time: float,
    ) -> OperationOutcome:
        detail = describe_error(error)
        outcome = OperationOutcome(
            target=ref.destination_path,
            status=OutcomeStatus.FAILED,
            operation=operation,
            resource_kind=RESOURCE_KIND,
            message=detail,
            error_detail=detail,
            error_kind=classify_error(error),
            duration_seconds=time.time() - start_time,
        )
        logger.error(f"Operation failed: {outcome}")
        return outcome


def _check_aligned(refs: Sequence[ArtifactRef], outcomes: Sequence[OperationOutcome]) -> None:
    if len(refs) != len(outcomes):
        raise ConfigurationError(f"Got {len(outcomes)} outcome(s) for {len(refs)} artifact(s)")
