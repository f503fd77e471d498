# jobs.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Optional, Sequence, Union

from . import expressions, settings
from .errors import InvalidInput, MissingRequiredField, WorkflowError
from .expressions import Expression
from .model import Concurrency, Defaults, Environment, Job, Permissions, Step
from .steps import checkout_step


@dataclass(frozen=True)
class JobOptions:
    """Accumulator the option functions build up before a Job is frozen."""
    permissions: Permissions = field(default_factory=Permissions)
    needs: List[str] = field(default_factory=list)
    if_: str = ""
    runs_on: List[str] = field(default_factory=list)
    outputs: Dict[str, str] = field(default_factory=dict)
    environment: Environment = field(default_factory=Environment)
    concurrency: Concurrency = field(default_factory=Concurrency)
    env: Dict[str, str] = field(default_factory=dict)
    defaults: Defaults = field(default_factory=Defaults)
    steps: List[Step] = field(default_factory=list)
    timeout_minutes: int = 0


# An option returns an updated copy of the options, or raises WorkflowError.
Option = Callable[[JobOptions], JobOptions]


@dataclass(frozen=True)
class JobInput:
    job_name: str

    def validate(self) -> List[WorkflowError]:
        errs: List[WorkflowError] = []
        if not self.job_name:
            errs.append(MissingRequiredField("job_name"))
        return errs


@dataclass(frozen=True)
class CommitChangesInput:
    commit_message: str
    ref: str
    deploy_key_secret: str = settings.DEPLOY_KEY_SECRET

    def validate(self) -> List[WorkflowError]:
        errs: List[WorkflowError] = []
        if not self.ref:
            errs.append(MissingRequiredField("ref"))
        if not self.commit_message:
            errs.append(MissingRequiredField("commit_message"))
        return errs


# ---------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------

def new_job(job_input: JobInput, *options: Option) -> Job:
    """
    Apply every option, validate the input and freeze the result into a Job.

    Every problem is collected before anything is raised: a caller that
    forgot both the job name and the commit ref hears about both in one
    InvalidInput. Nothing is returned on failure.
    """
    opts = JobOptions()
    errs: List[Exception] = []

    for option in options:
        try:
            opts = option(opts)
        except WorkflowError as e:
            errs.append(e)

    problems = job_input.validate()
    if problems:
        errs.append(InvalidInput("invalid input", list(problems)))

    if errs:
        raise InvalidInput("input problem(s) found", errs)

    return Job(
        name=job_input.job_name,
        permissions=opts.permissions,
        needs=list(opts.needs),
        if_=opts.if_,
        runs_on=list(opts.runs_on),
        outputs=dict(opts.outputs),
        environment=opts.environment,
        concurrency=opts.concurrency,
        env=dict(opts.env),
        defaults=opts.defaults,
        steps=[s.model_copy(deep=True) for s in opts.steps],
        timeout_minutes=opts.timeout_minutes,
    )


# ---------------------------------------------------------------------
# Generic options
# ---------------------------------------------------------------------

def with_permissions(permissions: Permissions) -> Option:
    return lambda opts: replace(opts, permissions=permissions)


def with_needs(*job_ids: str) -> Option:
    return lambda opts: replace(opts, needs=[*opts.needs, *job_ids])


def with_if(condition: Union[Expression, str]) -> Option:
    """Run the job conditionally. Conditions that can never change are rejected."""
    def apply(opts: JobOptions) -> JobOptions:
        expressions.check_always_true(condition)
        expressions.check_always_false(condition)
        return replace(opts, if_=str(condition))
    return apply


def with_runs_on(*labels: str) -> Option:
    return lambda opts: replace(opts, runs_on=list(labels))


def with_outputs(**outputs: str) -> Option:
    return lambda opts: replace(opts, outputs={**opts.outputs, **outputs})


def with_environment(name: str, url: str = "") -> Option:
    return lambda opts: replace(opts, environment=Environment(name=name, url=url))


def with_concurrency(group: str, cancel_in_progress: bool = False) -> Option:
    return lambda opts: replace(
        opts, concurrency=Concurrency(group=group, cancel_in_progress=cancel_in_progress)
    )


def with_env(**env) -> Option:
    # values forced to str, env entries are always strings on the wire
    return lambda opts: replace(opts, env={**opts.env, **{k: str(v) for k, v in env.items()}})


def with_defaults(defaults: Defaults) -> Option:
    return lambda opts: replace(opts, defaults=defaults)


def with_steps(*steps: Step) -> Option:
    return lambda opts: replace(opts, steps=[*opts.steps, *steps])


def with_timeout_minutes(minutes: int) -> Option:
    return lambda opts: replace(opts, timeout_minutes=minutes)


# ---------------------------------------------------------------------
# Commit changes
# ---------------------------------------------------------------------

def with_commit_changes_steps(commit_input: CommitChangesInput, *intermediate_steps: Step) -> Option:
    """
    Check out `commit_input.ref`, run the intermediate steps, then commit and push
    whatever they changed.

    The commit message is placed verbatim inside double quotes; callers
    are responsible for shell-safe content.
    """
    def apply(opts: JobOptions) -> JobOptions:
        problems = commit_input.validate()
        if problems:
            raise InvalidInput("invalid commit changes input", list(problems))

        steps: List[Step] = [
            checkout_step(**{
                "ssh-key": str(expressions.secrets(commit_input.deploy_key_secret)),
                "ref": commit_input.ref,
            }),
            Step(
                name="configure-git",
                run="\n".join([
                    "git config --local user.email 'github-actions@github.com'",
                    "git config --local user.name 'GitHub Actions'",
                ]),
            ),
            *intermediate_steps,
            Step(
                run="\n".join([
                    "git add .",
                    f'git commit -m "{commit_input.commit_message}"',
                    "git push",
                ]),
            ),
        ]
        return replace(opts, steps=[*opts.steps, *steps])
    return apply


# ---------------------------------------------------------------------
# External sync
# ---------------------------------------------------------------------

SYNC_PLACEHOLDER_NAME = "sync and wait"

SyncStepsProvider = Callable[[], Sequence[Step]]


def with_external_sync_steps(provider: Optional[SyncStepsProvider] = None) -> Option:
    """
    Hook for the long running reconciliation of a deployment target.

    The steps come from the external system's provider; without one a
    single placeholder step is appended.
    """
    def apply(opts: JobOptions) -> JobOptions:
        steps = list(provider()) if provider is not None else [Step(name=SYNC_PLACEHOLDER_NAME)]
        return replace(opts, steps=[*opts.steps, *steps])
    return apply
