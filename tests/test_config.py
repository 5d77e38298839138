"""Tests for CypherOpsConfig."""

import pytest

from cypherops.config import CypherOpsConfig


def test_defaults():
    """Test the default settings."""
    config = CypherOpsConfig()

    assert config.write_op_types == frozenset({"put", "write"})
    assert config.variable_length == 12
    assert config.escape_strings is True
    assert config.statement_padding == "    "


def test_environment_overrides(monkeypatch):
    """Test that settings are read from environment variables."""
    monkeypatch.setenv("CYPHEROPS_WRITE_OP_TYPES", "put, set ,")
    monkeypatch.setenv("CYPHEROPS_VARIABLE_LENGTH", "8")
    monkeypatch.setenv("CYPHEROPS_ESCAPE_STRINGS", "no")

    config = CypherOpsConfig()

    assert config.write_op_types == frozenset({"put", "set"})
    assert config.variable_length == 8
    assert config.escape_strings is False


def test_invalid_boolean(monkeypatch):
    """Test that an unrecognized flag value is rejected."""
    monkeypatch.setenv("CYPHEROPS_ESCAPE_STRINGS", "maybe")
    with pytest.raises(ValueError):
        CypherOpsConfig()


def test_invalid_variable_length():
    """Test that variable names must have at least one character."""
    with pytest.raises(ValueError):
        CypherOpsConfig(variable_length=0)


def test_write_types_from_list():
    """Test that write types given as a list are normalized."""
    config = CypherOpsConfig(write_op_types=["put"])
    assert config.write_op_types == frozenset({"put"})
    assert config.is_write("put")
    assert not config.is_write("del")


def test_from_dict_ignores_unknown_keys():
    """Test building config from a dictionary."""
    config = CypherOpsConfig.from_dict({"variable_length": 6, "neo4j_uri": "bolt://x"})
    assert config.variable_length == 6
    assert config.escape_strings is True
