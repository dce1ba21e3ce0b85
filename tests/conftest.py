from __future__ import annotations

import os
import tempfile
from pathlib import Path

# planner.config refuses to import without a database URL
_DB_DIR = Path(tempfile.mkdtemp(prefix="planner-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR / 'planner.db'}"
os.environ.setdefault("LOG_DIR", str(_DB_DIR / "logs"))

import pytest  # noqa: E402


@pytest.fixture()
def db_schema():
    from planner.infra.db import create_schema, drop_schema

    create_schema()
    yield
    drop_schema()
