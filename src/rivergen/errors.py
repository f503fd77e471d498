# errors.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List


class WorkflowError(Exception):
    """Base class for every error raised while building or decoding workflows."""


@dataclass
class MissingRequiredField(WorkflowError):
    field: str

    def __str__(self) -> str:
        return f"{self.field} is required"


@dataclass
class InvalidVariantShape(WorkflowError):
    """Wire data for a union-typed field matched none of its legal shapes."""
    variant: str
    expected: str
    value: Any = None

    def __str__(self) -> str:
        return f"invalid {self.variant} value {self.value!r}: expected {self.expected}"


@dataclass
class AmbiguousReference(WorkflowError):
    """A job that both delegates to another workflow and defines its own steps."""
    job: str
    uses: str

    def __str__(self) -> str:
        label = f"job '{self.job}'" if self.job else "job"
        return f"{label} sets uses={self.uses!r} and also defines steps; pick one"


@dataclass
class InvalidInput(WorkflowError):
    """
    Aggregate of every problem found while assembling a job.

    Errors are collected instead of raised one by one, so the caller sees
    all missing fields in a single report.
    """
    context: str
    errors: List[Exception] = field(default_factory=list)

    def __str__(self) -> str:
        lines = [f"{self.context}:"]
        for err in self.errors:
            for i, line in enumerate(str(err).splitlines()):
                lines.append(("  - " if i == 0 else "    ") + line)
        return "\n".join(lines)

    def missing_fields(self) -> List[str]:
        found: List[str] = []
        for err in self.errors:
            if isinstance(err, MissingRequiredField):
                found.append(err.field)
            elif isinstance(err, InvalidInput):
                found.extend(err.missing_fields())
        return found


@dataclass
class ConstantCondition(WorkflowError):
    value: str
    outcome: bool

    def __str__(self) -> str:
        return f"value is always {str(self.outcome).lower()}: {self.value!r}"


@dataclass
class DuplicateIdentifier(WorkflowError):
    document: str
    identifier: str

    def __str__(self) -> str:
        return f"workflow '{self.document}' already has a job '{self.identifier}'"


@dataclass
class DanglingReference(WorkflowError):
    document: str
    job: str
    reference: str

    def __str__(self) -> str:
        return (
            f"job '{self.job}' in workflow '{self.document}' "
            f"references unknown '{self.reference}'"
        )


@dataclass
class CyclicDependency(WorkflowError):
    document: str
    stuck: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"workflow '{self.document}' has a needs cycle. Stuck jobs: {self.stuck}"


@dataclass
class DuplicateFilename(WorkflowError):
    filename: str
    documents: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"workflows {self.documents} would all be written to '{self.filename}'"
