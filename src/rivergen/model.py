# model.py
from __future__ import annotations

import json
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    SerializerFunctionWrapHandler,
    field_validator,
    model_serializer,
    model_validator,
)

from .errors import AmbiguousReference
from .naming import filename_for
from .variants import Matrix, Secrets, StringOrInt


def _wire_alias(name: str) -> str:
    # timeout_minutes -> timeout-minutes, if_ -> if
    return name.rstrip("_").replace("_", "-")


def _is_empty(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    if isinstance(value, (int, float)):
        return value == 0
    return False


class WireModel(BaseModel):
    """
    Base for every document type.

    Serialization drops fields that are None or empty (`""`, 0, False,
    `{}`, `[]`). Fields listed in `keep_empty` are dropped only when None.
    """
    model_config = ConfigDict(alias_generator=_wire_alias, populate_by_name=True)

    keep_empty: ClassVar[frozenset] = frozenset()

    @model_serializer(mode="wrap")
    def omit_empty(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        data = handler(self)
        fields = type(self).model_fields
        keep = set()
        for name in self.keep_empty:
            keep.add(name)
            keep.add(fields[name].alias or name)
        return {
            k: v for k, v in data.items()
            if (k in keep and v is not None) or not _is_empty(v)
        }


def _listify(value: Any) -> Any:
    if isinstance(value, str):
        return [value]
    return value


# ---------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------

class AccessLevel(str, Enum):
    WRITE = "write"
    READ = "read"
    NONE = "none"


class Shell(str, Enum):
    BASH = "bash"
    SH = "sh"
    PWSH = "pwsh"
    PYTHON = "python"


class CallInputType(str, Enum):
    STRING = "string"
    BOOLEAN = "boolean"
    NUMBER = "number"


class DispatchInputType(str, Enum):
    STRING = "string"
    BOOLEAN = "boolean"
    NUMBER = "number"
    ENVIRONMENT = "environment"
    CHOICE = "choice"


# ---------------------------------------------------------------------
# Triggers
# ---------------------------------------------------------------------

class CallInput(WireModel):
    description: str = ""
    default: str = ""
    required: bool = False
    type: Optional[CallInputType] = None


class CallOutput(WireModel):
    description: str = ""
    value: str = ""


class CallSecret(WireModel):
    description: str = ""
    required: bool = False


class OnCall(WireModel):
    inputs: Dict[str, CallInput] = Field(default_factory=dict)
    outputs: Dict[str, CallOutput] = Field(default_factory=dict)
    secrets: Dict[str, CallSecret] = Field(default_factory=dict)


class OnWorkflowRun(WireModel):
    workflows: List[str] = Field(default_factory=list)
    types: List[str] = Field(default_factory=list)
    branches: List[str] = Field(default_factory=list)
    branches_ignore: List[str] = Field(default_factory=list)


class DispatchInput(WireModel):
    keep_empty: ClassVar[frozenset] = frozenset({"required"})

    description: str = ""
    required: bool = False
    default: str = ""
    type: Optional[DispatchInputType] = None
    options: List[str] = Field(default_factory=list)


class OnDispatch(WireModel):
    inputs: Dict[str, DispatchInput] = Field(default_factory=dict)


class Schedule(WireModel):
    cron: str


class OnPullRequest(WireModel):
    types: List[str] = Field(default_factory=list)
    branches: List[str] = Field(default_factory=list)
    branches_ignore: List[str] = Field(default_factory=list)
    paths: List[str] = Field(default_factory=list)
    paths_ignore: List[str] = Field(default_factory=list)


class OnPush(WireModel):
    branches: List[str] = Field(default_factory=list)
    branches_ignore: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    tags_ignore: List[str] = Field(default_factory=list)
    paths: List[str] = Field(default_factory=list)
    paths_ignore: List[str] = Field(default_factory=list)


class WorkflowOn(WireModel):
    """Trigger set. A trigger that is set is emitted even when it has no settings."""
    keep_empty: ClassVar[frozenset] = frozenset({
        "call", "run", "dispatch", "schedule", "pull_request", "pull_request_target", "push",
    })

    call: Optional[OnCall] = Field(default=None, alias="workflow_call")
    run: Optional[OnWorkflowRun] = Field(default=None, alias="workflow_run")
    dispatch: Optional[OnDispatch] = Field(default=None, alias="workflow_dispatch")
    schedule: Optional[List[Schedule]] = None
    pull_request: Optional[OnPullRequest] = Field(default=None, alias="pull_request")
    pull_request_target: Optional[OnPullRequest] = Field(default=None, alias="pull_request_target")
    push: Optional[OnPush] = None


# ---------------------------------------------------------------------
# Shared settings
# ---------------------------------------------------------------------

class Concurrency(WireModel):
    group: str = ""
    cancel_in_progress: bool = False


class Permissions(WireModel):
    actions: Optional[AccessLevel] = None
    attestations: Optional[AccessLevel] = None
    checks: Optional[AccessLevel] = None
    contents: Optional[AccessLevel] = None
    deployments: Optional[AccessLevel] = None
    discussions: Optional[AccessLevel] = None
    id_token: Optional[AccessLevel] = None
    issues: Optional[AccessLevel] = None
    models: Optional[AccessLevel] = None
    packages: Optional[AccessLevel] = None
    pages: Optional[AccessLevel] = None
    pull_requests: Optional[AccessLevel] = None
    security_events: Optional[AccessLevel] = None
    statuses: Optional[AccessLevel] = None


class Environment(WireModel):
    name: str = ""
    url: str = ""


class DefaultsRun(WireModel):
    shell: Optional[Shell] = None
    working_directory: str = ""


class Defaults(WireModel):
    run: DefaultsRun = Field(default_factory=DefaultsRun)


class ContainerCredentials(WireModel):
    username: str = ""
    password: str = ""


class Container(WireModel):
    image: str = ""
    env: Dict[str, str] = Field(default_factory=dict)
    ports: List[StringOrInt] = Field(default_factory=list)
    volumes: List[str] = Field(default_factory=list)
    credentials: ContainerCredentials = Field(default_factory=ContainerCredentials)
    options: str = ""


class Strategy(WireModel):
    keep_empty: ClassVar[frozenset] = frozenset({"matrix", "fail_fast"})

    matrix: Optional[Matrix] = None
    fail_fast: Optional[bool] = None
    max_parallel: int = 0


# ---------------------------------------------------------------------
# Steps and jobs
# ---------------------------------------------------------------------

class Step(WireModel):
    """One step of a job: an action reference (`uses`) or a script (`run`)."""
    id: str = ""
    name: str = ""
    if_: str = ""
    uses: str = ""
    run: str = ""
    working_directory: str = ""
    shell: Optional[Shell] = None
    with_: Dict[str, Any] = Field(default_factory=dict)
    env: Dict[str, str] = Field(default_factory=dict)
    continue_on_error: bool = False
    timeout_minutes: int = 0

    def with_name(self, name: str) -> Step:
        return self.model_copy(update={"name": name})

    def with_id(self, step_id: str) -> Step:
        return self.model_copy(update={"id": step_id})

    def with_env(self, key: str, value: str) -> Step:
        return self.model_copy(update={"env": {**self.env, key: value}})


class Job(WireModel):
    """
    A job inside a workflow.

    A job either runs its own `steps` or delegates to another workflow
    through `uses`; setting both is rejected.
    """
    keep_empty: ClassVar[frozenset] = frozenset({"secrets"})

    name: str = ""
    permissions: Permissions = Field(default_factory=Permissions)
    needs: List[str] = Field(default_factory=list)
    if_: str = ""
    runs_on: List[str] = Field(default_factory=list)
    environment: Environment = Field(default_factory=Environment)
    concurrency: Concurrency = Field(default_factory=Concurrency)
    outputs: Dict[str, str] = Field(default_factory=dict)
    env: Dict[str, str] = Field(default_factory=dict)
    defaults: Defaults = Field(default_factory=Defaults)
    strategy: Strategy = Field(default_factory=Strategy)
    container: Container = Field(default_factory=Container)
    steps: List[Step] = Field(default_factory=list)
    timeout_minutes: int = 0
    continue_on_error: bool = False
    uses: str = ""
    with_: Dict[str, Any] = Field(default_factory=dict)
    secrets: Optional[Secrets] = None

    listify_needs = field_validator("needs", "runs_on", mode="before")(_listify)

    @model_validator(mode="after")
    def check_uses_or_steps(self) -> Job:
        if self.uses and self.steps:
            raise AmbiguousReference(job=self.name, uses=self.uses)
        return self


# ---------------------------------------------------------------------
# Workflow (one generated document)
# ---------------------------------------------------------------------

class _BlockDumper(yaml.SafeDumper):
    pass


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_BlockDumper.add_representer(str, _represent_str)


class Workflow(WireModel):
    keep_empty: ClassVar[frozenset] = frozenset({"name", "on", "jobs"})

    name: str
    run_name: str = ""
    on: WorkflowOn = Field(default_factory=WorkflowOn)
    concurrency: Concurrency = Field(default_factory=Concurrency)
    defaults: Defaults = Field(default_factory=Defaults)
    env: Dict[str, str] = Field(default_factory=dict)
    permissions: Permissions = Field(default_factory=Permissions)
    jobs: Dict[str, Job] = Field(default_factory=dict)

    # pinned filename, used when other workflows reference this one
    _filename: Optional[str] = PrivateAttr(default=None)

    @property
    def filename(self) -> str:
        if self._filename:
            return self._filename
        return filename_for(self.name)

    def pin_filename(self, value: str) -> None:
        self._filename = value

    # ---- encoding ----

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def to_yaml(self) -> str:
        return yaml.dump(
            self.to_dict(),
            Dumper=_BlockDumper,
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )

    # ---- decoding ----

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Workflow:
        return cls.model_validate(data)

    @classmethod
    def from_yaml(cls, text: str) -> Workflow:
        data = yaml.safe_load(text)
        if not isinstance(data, dict):
            raise ValueError("workflow YAML must contain a mapping")
        # YAML 1.1 reads a bare `on:` key as boolean true
        if any(k is True for k in data):
            data["on"] = data.pop(True)
        return cls.from_dict(data)
