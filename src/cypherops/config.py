"""Configuration for statement generation."""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment.

    Args:
        name: Environment variable name
        default: Value used when the variable is unset or empty

    Returns:
        Parsed flag

    Raises:
        ValueError: If the variable holds an unrecognized value
    """
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {raw!r}")


def _env_op_types(name: str, default: str) -> FrozenSet[str]:
    raw = os.getenv(name, default)
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


@dataclass
class CypherOpsConfig:
    """Settings for turning change ops into Cypher statements."""

    write_op_types: FrozenSet[str] = field(
        default_factory=lambda: _env_op_types("CYPHEROPS_WRITE_OP_TYPES", "put,write")
    )
    variable_length: int = field(
        default_factory=lambda: int(os.getenv("CYPHEROPS_VARIABLE_LENGTH", "12"))
    )
    escape_strings: bool = field(
        default_factory=lambda: _env_bool("CYPHEROPS_ESCAPE_STRINGS", True)
    )
    statement_padding: str = "    "

    def __post_init__(self) -> None:
        if isinstance(self.write_op_types, str):
            self.write_op_types = frozenset(
                part.strip() for part in self.write_op_types.split(",") if part.strip()
            )
        else:
            self.write_op_types = frozenset(self.write_op_types)
        if self.variable_length < 1:
            raise ValueError(
                f"variable_length must be at least 1, got {self.variable_length}"
            )

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "CypherOpsConfig":
        """Create config from dictionary, ignoring unknown keys."""
        return cls(**{k: v for k, v in config.items() if k in cls.__dataclass_fields__})

    def is_write(self, op_type: str) -> bool:
        """Whether ops of this type carry a payload to upsert."""
        return op_type in self.write_op_types
