"""
Operation outcomes and execution plans.

Every fallible step in snowkit returns an OperationOutcome instead of raising;
outcomes are collected per phase and reported at the end of a run.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .enums import ErrorKind, OperationType, OutcomeStatus

_STATUS_ICONS = {
    OutcomeStatus.SUCCESS: "✅",
    OutcomeStatus.FAILED: "❌",
    OutcomeStatus.SKIPPED: "⏭️",
}


@dataclass
class OperationOutcome:
    """Result of a single operation."""

    target: str
    status: OutcomeStatus
    operation: OperationType
    resource_kind: Optional[str] = None
    message: str = ""
    error_detail: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    fatal: bool = False
    duration_seconds: float = 0.0
    changes: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    @property
    def failed(self) -> bool:
        return self.status == OutcomeStatus.FAILED

    def __str__(self) -> str:
        """String representation of the outcome."""
        icon = _STATUS_ICONS[self.status]
        kind = f"{self.resource_kind} " if self.resource_kind else ""
        text = f"{icon} {self.operation.value} {kind}{self.target}: {self.message}"
        if self.error_detail and self.error_detail not in self.message:
            text += f" ({self.error_detail})"
        return text


@dataclass
class ExecutionPlan:
    """Execution plan showing what will be done."""

    title: str = "Execution Plan"
    operations: List[OperationOutcome] = field(default_factory=list)

    def add_operation(
        self,
        operation: OperationType,
        resource_kind: str,
        target: str,
        changes: Optional[Dict[str, Any]] = None
    ):
        """Add an operation to the plan."""
        self.operations.append(OperationOutcome(
            target=target,
            status=OutcomeStatus.SUCCESS,  # Plan assumes success
            operation=operation,
            resource_kind=resource_kind,
            message="Planned",
            changes=changes or {}
        ))

    def __len__(self) -> int:
        return len(self.operations)

    def __str__(self) -> str:
        """String representation of the plan."""
        if not self.operations:
            return f"{self.title}: no operations planned"

        lines = [f"{self.title}:"]
        for i, op in enumerate(self.operations, 1):
            lines.append(f"  {i}. {op.operation.value} {op.resource_kind} {op.target}")
            if op.changes:
                for key, value in op.changes.items():
                    lines.append(f"      {key}: {value}")

        lines.append(f"\nTotal operations: {len(self.operations)}")
        return "\n".join(lines)
