"""Service topology: the input the River is built from."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field

from .naming import join


class Destination(BaseModel):
    """A deployment target: a cluster name and an optional namespace."""
    name: str = Field(min_length=1)
    namespace: str = ""

    def __str__(self) -> str:
        return join("-", self.name, self.namespace)


class DestinationGroup(BaseModel):
    name: str = Field(min_length=1)
    destinations: List[Destination] = Field(default_factory=list)


class Service(BaseModel):
    name: str = Field(min_length=1)
    destination_groups: List[DestinationGroup] = Field(default_factory=list)


def load_service(path: str | Path) -> Service:
    """
    Load a service description from a YAML or JSON file.

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if the content is not a mapping (pydantic's
            ValidationError, also a ValueError, for a bad shape)
    """
    svc_path = Path(path)
    text = svc_path.read_text(encoding="utf-8")
    if svc_path.suffix == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)

    if not isinstance(data, dict):
        raise ValueError(f"Service file must contain a mapping: {svc_path}")

    return Service.model_validate(data)
