# steps.py
from __future__ import annotations

from typing import Any

from . import settings
from .model import Shell, Step


def checkout_step(**with_: Any) -> Step:
    """Check out the repository with a shallow clone; keyword args extend `with`."""
    return Step(uses=settings.CHECKOUT_ACTION, with_={"fetch-depth": 1, **with_})


def run_step(run: str, *, name: str = "", step_id: str = "") -> Step:
    return Step(id=step_id, name=name, run=run)


def ternary_step(step_id: str, bash_cond: str, then_val: str, else_val: str) -> Step:
    """
    Pick one of two values with a bash conditional instead of an expression.

    `cond && a || b` expressions fall through to `b` whenever `a` is falsy,
    so a shell `if` is the reliable way to branch. The chosen value is
    published as the step output `value`:

        steps.<step_id>.outputs.value
    """
    run = "\n".join([
        f"if [[ {bash_cond} ]]; then",
        f'  echo "value={then_val}" >> "$GITHUB_OUTPUT"',
        "else",
        f'  echo "value={else_val}" >> "$GITHUB_OUTPUT"',
        "fi",
    ])
    return Step(id=step_id, run=run, shell=Shell.BASH)
