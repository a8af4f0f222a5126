"""Functional test fixtures for the order keys service.

Builds the FastAPI app in-process with an explicit configuration so tests
never depend on environment variables or config files of the host.
"""

from __future__ import annotations

import json
import pathlib

import pytest
from fastapi.testclient import TestClient
from jsonschema import Draft202012Validator

from order_keys.config import AppConfig, RankingConfig
from order_keys.main import create_app

_ROOT = pathlib.Path(__file__).resolve().parents[2]
SCHEMAS_DIR = _ROOT / "schemas"


@pytest.fixture()
def client() -> TestClient:
    """Client for an app using the default (nudge) fallback policy."""
    return TestClient(create_app(AppConfig()))


@pytest.fixture()
def normalizing_client() -> TestClient:
    """Client for an app that renormalises instead of nudging on exhausted gaps."""
    cfg = AppConfig(ranking=RankingConfig(fallback_policy="normalize"))
    return TestClient(create_app(cfg))


@pytest.fixture()
def validate_schema():
    def _validate(schema_name: str, instance: object) -> None:
        schema = json.loads((SCHEMAS_DIR / schema_name).read_text(encoding="utf-8"))
        Draft202012Validator(schema).validate(instance)

    return _validate
