"""
Run reporting: per-phase outcome listings and the final summary.
"""

from typing import Dict, List, Sequence

from snowkit.models import OperationOutcome, OutcomeStatus


def format_phase(title: str, outcomes: Sequence[OperationOutcome]) -> str:
    """One line per outcome under a phase banner."""
    lines = ["=" * 50, title.upper(), "=" * 50]
    if not outcomes:
        lines.append("  No operations performed")
    lines.extend(f"  {outcome}" for outcome in outcomes)
    return "\n".join(lines)


def has_fatal(phases: Dict[str, Sequence[OperationOutcome]]) -> bool:
    return any(o.fatal for outcomes in phases.values() for o in outcomes)


def get_summary(phases: Dict[str, Sequence[OperationOutcome]]) -> str:
    """
    Totals across every phase, followed by the failed operations.

    Args:
        phases: Phase title -> outcomes, in run order

    Returns:
        Summary string
    """
    outcomes: List[OperationOutcome] = [o for phase in phases.values() for o in phase]
    if not outcomes:
        return "No operations performed"

    counts = {status: sum(1 for o in outcomes if o.status == status) for status in OutcomeStatus}
    lines = [
        "Execution Summary:",
        f"  Total operations: {len(outcomes)}",
        f"  Successful: {counts[OutcomeStatus.SUCCESS]}",
        f"  Failed: {counts[OutcomeStatus.FAILED]}",
        f"  Skipped: {counts[OutcomeStatus.SKIPPED]}",
    ]

    failed = [(title, o) for title, phase in phases.items() for o in phase if o.failed]
    if failed:
        lines.append("\nFailed operations:")
        for title, outcome in failed:
            marker = " [FATAL]" if outcome.fatal else ""
            lines.append(f"  - [{title}]{marker} {outcome}")

    if has_fatal(phases):
        lines.append("\nA fatal failure occurred; later phases were not run.")

    return "\n".join(lines)
