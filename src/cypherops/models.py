"""Pydantic models for cypherops data structures."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class EntityKind(str, Enum):
    """Kind of entity a ref points at."""

    PAGE = "page"
    LIST = "list"
    COMPONENT = "component"


class ValueKind(str, Enum):
    """Shape of a decoded JSON value."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    ARRAY = "array"
    OBJECT = "object"


class ChangeOp(BaseModel):
    """One entry from the change feed of the key/value store."""

    key: str = Field(..., description="Ref of the entity being written")
    type: str = Field(..., description="Operation kind, e.g. 'put' or 'del'")
    value: Optional[str] = Field(
        default=None, description="JSON-encoded payload of the write"
    )


class ParsedOp(BaseModel):
    """A decoded write op ready for statement generation."""

    index: int = Field(..., description="Position of the op in the input batch")
    ref: str = Field(..., description="Ref of the entity being written")
    properties: Dict[str, Any] = Field(
        default_factory=dict, description="Decoded payload, in insertion order"
    )


class RelationshipStatement(BaseModel):
    """Match two existing nodes and link them with a COMPONENT edge."""

    parent_ref: str = Field(..., description="Ref of the parent page or component")
    child_ref: str = Field(..., description="Ref of the child component")
    parent_var: str = Field(..., description="Query variable bound to the parent")
    child_var: str = Field(..., description="Query variable bound to the child")
    parent_match: str = Field(..., description="MATCH clause selecting the parent")
    child_match: str = Field(..., description="MATCH clause selecting the child")

    @property
    def cypher(self) -> str:
        """Full statement text."""
        return (
            f"{self.parent_match}    {self.child_match}    "
            f"WITH {self.parent_var}, {self.child_var}    "
            f"CREATE ({self.parent_var})-[:COMPONENT]->({self.child_var})"
        )

    def __str__(self) -> str:
        return self.cypher


class OpQueries(BaseModel):
    """Statements generated for a single op."""

    ref: str
    kind: EntityKind
    merge: str = ""
    relationships: List[RelationshipStatement] = Field(default_factory=list)

    @property
    def supported(self) -> bool:
        """Whether statements could be generated for this kind of entity."""
        return self.kind != EntityKind.LIST


class BatchResult(BaseModel):
    """Output of one batch: merge text plus relationship statements.

    The merge statements are concatenated into one string so they can be sent
    as a single query; relationship statements must run afterwards, one by
    one, once every node they match exists.
    """

    merge: str = Field(default="", description="Concatenated MERGE statements")
    relationship_statements: List[RelationshipStatement] = Field(
        default_factory=list, description="Relationship statements in op order"
    )
    unsupported: List[str] = Field(
        default_factory=list, description="Refs skipped because their kind is unsupported"
    )

    @property
    def relationships(self) -> List[str]:
        """Relationship statements rendered as query text."""
        return [statement.cypher for statement in self.relationship_statements]

    def to_dict(self) -> Dict[str, Any]:
        """Plain representation handed to the statement executor.

        Returns:
            Dictionary with 'merge', 'relationships' and 'unsupported' keys
        """
        return {
            "merge": self.merge,
            "relationships": self.relationships,
            "unsupported": list(self.unsupported),
        }
