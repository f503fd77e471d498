"""
The River: one root workflow delegating to a chain of child workflows.

A service's destination groups are deployed one after another. Each group
gets its own child workflow (commit the change, then sync every
destination of the group), and the root workflow calls the children in
group order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from . import settings
from .errors import DuplicateIdentifier
from .graph import check_references, stages
from .jobs import (
    CommitChangesInput,
    JobInput,
    SyncStepsProvider,
    new_job,
    with_commit_changes_steps,
    with_external_sync_steps,
    with_needs,
    with_runs_on,
)
from .layout import uses_reference
from .model import Job, OnCall, OnDispatch, Step, Workflow, WorkflowOn
from .naming import join
from .service import Service
from .steps import checkout_step, run_step
from .variants import Secrets
from .ui.console import get_console

SOURCE_JOB = "source"
COMMIT_JOB = "commit"

GENERATE_COMMAND = f"{settings.CLI_NAME} generate applications"
UPDATE_COMMAND = f"{settings.CLI_NAME} update application"


@dataclass(frozen=True)
class River:
    workflow: Workflow
    child_workflows: Tuple[Workflow, ...]

    @property
    def all_workflows(self) -> List[Workflow]:
        return [self.workflow, *self.child_workflows]

    def stages(self) -> List[List[str]]:
        """Execution stages of the root workflow."""
        return stages(self.workflow)


def _add_job(workflow: Workflow, job_id: str, job: Job) -> None:
    if job_id in workflow.jobs:
        raise DuplicateIdentifier(workflow.name, job_id)
    workflow.jobs[job_id] = job


def build(
    service: Service,
    *,
    ref: str = settings.TARGET_REF,
    runs_on: str = settings.RUNNER,
    sync_steps: Optional[SyncStepsProvider] = None,
) -> River:
    """
    Assemble the River for a service.

    Args:
        service: service topology; group order is deployment order
        ref: branch the commit jobs check out and push to
        runs_on: runner label for the generated jobs
        sync_steps: provider of the per-destination sync steps

    Raises:
        InvalidInput: a job could not be assembled
        DuplicateIdentifier: two jobs of one workflow share an identifier
        DanglingReference / CyclicDependency: the generated set is inconsistent
    """
    console = get_console()

    root = Workflow(
        name=service.name,
        on=WorkflowOn(call=OnCall(), dispatch=OnDispatch()),
    )
    root.jobs[SOURCE_JOB] = Job(
        runs_on=[runs_on],
        steps=[checkout_step(), run_step(GENERATE_COMMAND)],
    )

    children: List[Workflow] = []
    previous: Optional[Workflow] = None

    for group in service.destination_groups:
        child_name = join("-", service.name, group.name)
        console.print_debug(f"river: assembling {child_name!r}")

        commit_options = [
            with_runs_on(runs_on),
            with_commit_changes_steps(
                CommitChangesInput(commit_message=f"update {child_name}", ref=ref),
                Step(run=UPDATE_COMMAND),
            ),
        ]
        if previous is not None:
            commit_options.append(with_needs(previous.name))

        commit_job = new_job(JobInput(job_name=f"commit {child_name}"), *commit_options)

        child = Workflow(name=child_name, on=WorkflowOn(call=OnCall()))
        _add_job(child, COMMIT_JOB, commit_job)

        for destination in group.destinations:
            sync_job = new_job(
                JobInput(job_name=str(destination)),
                with_runs_on(runs_on),
                with_needs(COMMIT_JOB),
                with_external_sync_steps(sync_steps),
            )
            _add_job(child, str(destination), sync_job)

        _add_job(root, child.name, Job(
            name=child.name,
            needs=[previous.name if previous is not None else SOURCE_JOB],
            uses=uses_reference(child),
            secrets=Secrets.inherit_all(),
        ))

        children.append(child)
        previous = child

    river = River(workflow=root, child_workflows=tuple(children))
    check_references(river.all_workflows)
    console.print_debug(f"river: built {len(children)} child workflow(s) for {service.name!r}")
    return river
