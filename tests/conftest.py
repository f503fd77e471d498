"""Shared fixtures."""

import pytest

from rivergen.service import Destination, DestinationGroup, Service
from rivergen.ui.console import Console, set_console


@pytest.fixture(autouse=True)
def quiet_console():
    """Each test starts from a fresh, non-debug console."""
    set_console(Console())
    yield


@pytest.fixture
def service():
    """A service deployed in three stages: dev, staging, prod."""
    return Service(
        name="payments",
        destination_groups=[
            DestinationGroup(name="dev", destinations=[Destination(name="dev-1")]),
            DestinationGroup(
                name="staging",
                destinations=[
                    Destination(name="stg-east", namespace="payments"),
                    Destination(name="stg-west", namespace="payments"),
                ],
            ),
            DestinationGroup(name="prod", destinations=[Destination(name="prod-1")]),
        ],
    )


@pytest.fixture
def service_file(tmp_path):
    path = tmp_path / "service.yaml"
    path.write_text(
        "name: payments\n"
        "destination_groups:\n"
        "  - name: dev\n"
        "    destinations:\n"
        "      - name: dev-1\n"
        "  - name: prod\n"
        "    destinations:\n"
        "      - name: prod-1\n"
        "        namespace: payments\n",
        encoding="utf-8",
    )
    return path
