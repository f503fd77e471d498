from __future__ import annotations
import os

CLI_NAME = "rivergen"
WORKFLOWS_DIR = os.environ.get("RIVERGEN_WORKFLOWS_DIR", ".github/workflows")
TARGET_REF = os.environ.get("RIVERGEN_TARGET_REF", "main")
RUNNER = os.environ.get("RIVERGEN_RUNNER", "ubuntu-latest")
DEPLOY_KEY_SECRET = os.environ.get("RIVERGEN_DEPLOY_KEY_SECRET", "WRITE_DEPLOY_KEY")
CHECKOUT_ACTION = os.environ.get("RIVERGEN_CHECKOUT_ACTION", "actions/checkout@v4")
