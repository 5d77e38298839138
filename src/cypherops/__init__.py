"""cypherops - Translate key/value change ops into Cypher graph statements."""

from cypherops.config import CypherOpsConfig
from cypherops.errors import CypherOpsError, OpDecodeError
from cypherops.models import BatchResult, ChangeOp, RelationshipStatement
from cypherops.query.assembler import QueryAssembler, ops_to_cypher

__all__ = [
    "ops_to_cypher",
    "QueryAssembler",
    "CypherOpsConfig",
    "BatchResult",
    "ChangeOp",
    "RelationshipStatement",
    "CypherOpsError",
    "OpDecodeError",
]
