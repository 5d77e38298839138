"""Pytest configuration and fixtures for cypherops tests."""

import json
import random
from pathlib import Path
from typing import List

import pytest

from cypherops.config import CypherOpsConfig
from cypherops.query.assembler import QueryAssembler
from cypherops.query.relationships import BatchContext


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    """Keep CYPHEROPS_* variables from the shell out of the tests."""
    for name in (
        "CYPHEROPS_WRITE_OP_TYPES",
        "CYPHEROPS_VARIABLE_LENGTH",
        "CYPHEROPS_ESCAPE_STRINGS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config() -> CypherOpsConfig:
    """Provide the default configuration."""
    return CypherOpsConfig(
        write_op_types=frozenset({"put", "write"}),
        variable_length=12,
        escape_strings=True,
    )


@pytest.fixture
def legacy_config() -> CypherOpsConfig:
    """Provide a configuration producing unescaped statements."""
    return CypherOpsConfig(escape_strings=False)


@pytest.fixture
def context(config: CypherOpsConfig) -> BatchContext:
    """Provide a batch context with reproducible variable names."""
    return BatchContext.from_config(config, random.Random(1234))


@pytest.fixture
def assembler(config: CypherOpsConfig) -> QueryAssembler:
    """Provide an assembler with reproducible variable names."""
    return QueryAssembler(config, rng=random.Random(1234))


def _op(key: str, data, op_type: str = "put") -> dict:
    return {"key": key, "type": op_type, "value": json.dumps(data)}


@pytest.fixture
def make_op():
    """Provide a builder for op dictionaries as the change feed delivers them."""
    return _op


@pytest.fixture
def sample_ops() -> List[dict]:
    """Provide a batch mixing pages, components, lists and deletes."""
    return [
        _op(
            "site.com/pages/home",
            {
                "title": "Home",
                "main": ["site.com/components/article/instances/a1", {"_ref": "site.com/components/ad/instances/b1"}],
            },
        ),
        _op(
            "site.com/components/article/instances/a1",
            {"headline": "Hello", "wordCount": 120, "byline": {"_ref": "site.com/components/byline/instances/c1", "name": "Ann"}},
        ),
        {"key": "site.com/components/old/instances/z", "type": "del"},
        _op("site.com/lists/tags", {"items": ["a", "b"]}),
        _op("site.com/components/ad/instances/b1", {"size": "300x250", "live": True}),
    ]


@pytest.fixture
def ops_file(tmp_path: Path, sample_ops: List[dict]) -> Path:
    """Write the sample batch to a JSON file."""
    file_path = tmp_path / "ops.json"
    file_path.write_text(json.dumps(sample_ops), encoding="utf-8")
    return file_path
