# graph.py
from __future__ import annotations

from collections import deque
from typing import Collection, Dict, List, Mapping, Sequence, Set, Tuple

from .errors import CyclicDependency, DanglingReference, DuplicateFilename
from .layout import uses_reference
from .model import Job, Workflow


def build_dag(
    document: str,
    jobs: Mapping[str, Job],
    external: Collection[str] = (),
) -> Tuple[Dict[str, Set[str]], Dict[str, int]]:
    """
    Build the needs graph of one workflow.

    Requires:
      - every entry of job.needs names a sibling job, or one of `external`
        (names resolved outside this workflow, which add no edge)
    """
    adj: Dict[str, Set[str]] = {n: set() for n in jobs}
    indeg: Dict[str, int] = {n: 0 for n in jobs}

    for name, job in jobs.items():
        for need in job.needs:
            if need not in jobs:
                if need in external:
                    continue
                raise DanglingReference(document, name, need)
            # Edge need -> name (need must run before name)
            if name not in adj[need]:
                adj[need].add(name)
                indeg[name] += 1

    return adj, indeg


def topo_levels(
    document: str,
    adj: Dict[str, Set[str]],
    indeg: Dict[str, int],
) -> List[List[str]]:
    """
    Convert the graph into topological stages.
    Jobs in one stage do not depend on each other.
    """
    indeg = dict(indeg)  # copy (we mutate it)
    q = deque(sorted([n for n, d in indeg.items() if d == 0]))

    levels: List[List[str]] = []
    processed = 0

    while q:
        level_size = len(q)
        level: List[str] = []

        for _ in range(level_size):
            node = q.popleft()
            level.append(node)
            processed += 1

            for child in sorted(adj.get(node, set())):
                indeg[child] -= 1
                if indeg[child] == 0:
                    q.append(child)

        levels.append(level)

    if processed != len(indeg):
        remaining = sorted([n for n, d in indeg.items() if d > 0])
        raise CyclicDependency(document, remaining)

    return levels


def stages(workflow: Workflow, external: Collection[str] = ()) -> List[List[str]]:
    adj, indeg = build_dag(workflow.name, workflow.jobs, external)
    return topo_levels(workflow.name, adj, indeg)


def check_references(workflows: Sequence[Workflow]) -> None:
    """
    Check that a generated set of workflows is consistent.

    Filenames must be unique within the set, local `uses` references must
    point at a workflow of the set, and every needs graph must resolve and
    be acyclic. A needs entry may also name a workflow of the set: that is
    how consecutive River stages are chained.
    """
    by_filename: Dict[str, List[str]] = {}
    for wf in workflows:
        by_filename.setdefault(wf.filename, []).append(wf.name)
    for filename, documents in by_filename.items():
        if len(documents) > 1:
            raise DuplicateFilename(filename, documents)

    names = {wf.name for wf in workflows}
    references = {uses_reference(wf) for wf in workflows}

    for wf in workflows:
        for job_id, job in wf.jobs.items():
            if job.uses.startswith("./") and job.uses not in references:
                raise DanglingReference(wf.name, job_id, job.uses)
        stages(wf, external=names)
