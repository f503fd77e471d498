# layout.py
from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Iterable, List

from . import settings
from .model import Workflow


def workflow_path(workflow: Workflow, base: str = settings.WORKFLOWS_DIR) -> PurePosixPath:
    """Repository relative location of a workflow, e.g. `.github/workflows/foo.yml`."""
    return PurePosixPath(base) / workflow.filename


def uses_reference(workflow: Workflow) -> str:
    """Value of `uses` for a job that calls `workflow` from the same repository."""
    return f"./{workflow_path(workflow)}"


def write_workflows(workflows: Iterable[Workflow], root: str | Path = ".") -> List[Path]:
    """
    Write each workflow as YAML under `root`.

    Returns:
        Paths of the written files, in input order.
    """
    written: List[Path] = []
    for wf in workflows:
        path = Path(root) / workflow_path(wf)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(wf.to_yaml(), encoding="utf-8")
        written.append(path)
    return written


def stale_workflows(workflows: Iterable[Workflow], root: str | Path = ".") -> List[Path]:
    """Paths under `root` that are missing or differ from the generated content."""
    stale: List[Path] = []
    for wf in workflows:
        path = Path(root) / workflow_path(wf)
        if not path.exists() or path.read_text(encoding="utf-8") != wf.to_yaml():
            stale.append(path)
    return stale
