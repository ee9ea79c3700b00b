"""
snowkit command line driver.

Runs the full setup against a Snowflake account:

    1. Teardown   drop the re-run cleanup set (model and its services,
                  notebooks, role)
    2. Provision  create the structural resources
    3. Sync       fetch the notebooks and publish them to the notebook stage
    4. Attach     create the notebooks from the published files

Usage:
    # Full setup with the default (MONAI) configuration
    snowkit

    # Use a YAML configuration and a named connection
    snowkit --config monai.yml --connection dev

    # Show what would be done, without connecting
    snowkit --dry-run

    # Drop every declared resource
    snowkit --destroy
"""

import argparse
import logging
import sys
from typing import Dict, List, Optional, Sequence

from snowflake.snowpark import Session

from snowkit.artifacts import ArtifactSyncPipeline, HttpFetcher
from snowkit.blueprint import (
    build_artifact_refs,
    build_resource_specs,
    notebook_specs,
    rerun_cleanup_specs,
    structural_specs,
)
from snowkit.client import SnowparkResourceClient, StageStore
from snowkit.config import ProvisioningConfig, load_config
from snowkit.connection import get_session
from snowkit.errors import ConfigurationError
from snowkit.models import OperationOutcome
from snowkit.orchestrator import Orchestrator
from snowkit.report import format_phase, get_summary, has_fatal

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_CONFIGURATION = 2

Phases = Dict[str, List[OperationOutcome]]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snowkit",
        description="Provision the MONAI medical imaging resources in Snowflake",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        "-c",
        help="YAML configuration file (default: $SNOWKIT_CONFIG, then built-in defaults)",
    )
    parser.add_argument(
        "--connection",
        help="Named Snowflake connection (default: SNOWFLAKE_* environment variables)",
    )
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Print the execution plan without connecting",
    )
    parser.add_argument(
        "--destroy",
        action="store_true",
        help="Drop every declared resource instead of running the setup",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug output, including every SQL statement",
    )
    return parser


def print_plans(config: ProvisioningConfig, destroy: bool) -> None:
    """Print the plans of every phase; nothing is sent to Snowflake."""
    orchestrator = Orchestrator(None, config.orchestrator)
    logger.info(f"[DRY RUN] Planning {'teardown' if destroy else 'setup'} for database {config.database}")
    if destroy:
        print(orchestrator.plan_teardown(build_resource_specs(config)))
        return

    # Validate the full declaration, not just the subsets each phase sees
    orchestrator.validate(build_resource_specs(config))
    print(orchestrator.plan_teardown(rerun_cleanup_specs(config)))
    print()
    print(orchestrator.plan_provision(structural_specs(config)))
    print()
    print("Artifacts to sync:")
    for ref in build_artifact_refs(config):
        print(f"  - {ref.source_url} -> {ref.destination_path}")
    print()
    print(orchestrator.plan_attach(notebook_specs(config)))


def run_setup(orchestrator: Orchestrator, config: ProvisioningConfig, session: Session) -> Phases:
    """
    Teardown -> Provision -> Sync -> Attach.

    Sync and attach are skipped when provisioning produced a fatal outcome.
    """
    orchestrator.validate(build_resource_specs(config))

    phases: Phases = {}
    phases["Teardown"] = orchestrator.teardown(rerun_cleanup_specs(config))
    phases["Provision"] = orchestrator.provision(structural_specs(config))
    if has_fatal(phases):
        logger.error("Provisioning hit a fatal failure; skipping artifact sync and attach")
        return phases

    refs = build_artifact_refs(config)
    pipeline = ArtifactSyncPipeline(config.sync)
    store = StageStore(session)
    fetcher = HttpFetcher()
    try:
        phases["Sync"] = pipeline.run(refs, fetcher, store)
    finally:
        fetcher.close()

    phases["Verify"] = pipeline.verify(refs, phases["Sync"], store.list)
    published = pipeline.published(refs, phases["Verify"])
    phases["Attach"] = orchestrator.attach_artifacts(notebook_specs(config), published)
    return phases


def run(args: argparse.Namespace) -> int:
    config = load_config(args.config)

    if args.dry_run:
        print_plans(config, args.destroy)
        return EXIT_OK

    session = get_session(args.connection)
    try:
        orchestrator = Orchestrator(SnowparkResourceClient(session), config.orchestrator)
        if args.destroy:
            phases: Phases = {"Teardown": orchestrator.teardown(build_resource_specs(config))}
        else:
            phases = run_setup(orchestrator, config, session)
    finally:
        session.close()

    for title, outcomes in phases.items():
        print(format_phase(title, outcomes))
        print()
    print(get_summary(phases))

    return EXIT_FATAL if has_fatal(phases) else EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        return run(args)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIGURATION


if __name__ == "__main__":
    sys.exit(main())
