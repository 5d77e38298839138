"""Assembly of MERGE and relationship statements for a batch of change ops."""

import logging
import random
from typing import Any, Dict, Iterable, List, Optional, Tuple

from cypherops.config import CypherOpsConfig
from cypherops.models import (
    BatchResult,
    EntityKind,
    OpQueries,
    ParsedOp,
    RelationshipStatement,
)
from cypherops.parsing.classifier import entity_kind, may_relate
from cypherops.parsing.decoder import OpDecoder, RawOp
from cypherops.query import cypher
from cypherops.query.relationships import BatchContext, RelationshipBuilder

logger = logging.getLogger(__name__)


class QueryAssembler:
    """Turns change ops into the statements that mirror them in the graph.

    Pages become ``Page`` nodes keyed by ``uri``, everything else but lists
    becomes ``Component`` nodes keyed by ``_ref``. Properties holding
    component references also yield COMPONENT relationships from the op's
    node to the referenced components.

    Example:
        >>> assembler = QueryAssembler()
        >>> result = assembler.assemble([
        ...     {"key": "/components/x", "type": "put", "value": '{"title": "hi"}'}
        ... ])
        >>> result.merge
        "MERGE (c0:Component {_ref: '/components/x' }) ON MATCH SET c0 += {title: 'hi' } ON CREATE SET c0 += {title: 'hi' }    "
    """

    def __init__(
        self,
        config: Optional[CypherOpsConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Initialize the assembler.

        Args:
            config: Settings; read from environment variables if None
            rng: Random source for query variable names
        """
        self.config = config or CypherOpsConfig()
        self.rng = rng
        self.decoder = OpDecoder(self.config)

    def new_context(self) -> BatchContext:
        """Create the state shared by all ops of one batch."""
        return BatchContext.from_config(self.config, self.rng)

    def values_to_cypher(
        self, properties: Dict[str, Any], parent_ref: str, builder: RelationshipBuilder
    ) -> Tuple[str, List[RelationshipStatement]]:
        """Convert payload properties into a property map body.

        Args:
            properties: Decoded payload of the op
            parent_ref: Ref of the op, parent of any related component
            builder: Relationship builder bound to the batch context

        Returns:
            Tuple of (joined property assignments, relationship statements)
        """
        assignments = []
        relationships: List[RelationshipStatement] = []

        for name, value in properties.items():
            assignments.append(
                cypher.format_property(name, value, escape=self.config.escape_strings)
            )
            if may_relate(value):
                relationships.extend(builder.build(parent_ref, value))

        return ", ".join(assignments), relationships

    def op_to_queries(self, op: ParsedOp, builder: RelationshipBuilder) -> OpQueries:
        """Build the statements for one decoded op.

        Args:
            op: Decoded write op
            builder: Relationship builder bound to the batch context

        Returns:
            OpQueries; list refs come back empty and unsupported
        """
        kind = entity_kind(op.ref)

        if kind == EntityKind.LIST:
            logger.warning(f"Lists are not supported, skipping {op.ref}")
            return OpQueries(ref=op.ref, kind=kind)

        properties, relationships = self.values_to_cypher(op.properties, op.ref, builder)
        merge = cypher.merge_statement(
            kind, op.ref, op.index, properties, escape=self.config.escape_strings
        )
        logger.debug(
            f"Op {op.index} ({op.ref}): {len(op.properties)} properties, "
            f"{len(relationships)} relationships"
        )
        return OpQueries(ref=op.ref, kind=kind, merge=merge, relationships=relationships)

    def assemble(self, raw_ops: Iterable[RawOp]) -> BatchResult:
        """Build all statements for a batch.

        Args:
            raw_ops: Ops from the change feed, as ChangeOp models or mappings

        Returns:
            BatchResult with the concatenated MERGE text and the relationship
            statements in op order

        Raises:
            OpDecodeError: If any write op cannot be decoded
        """
        parsed_ops = self.decoder.parse_ops(raw_ops)
        builder = RelationshipBuilder(self.new_context())

        merges = []
        relationships: List[RelationshipStatement] = []
        unsupported = []

        for op in parsed_ops:
            queries = self.op_to_queries(op, builder)
            if not queries.supported:
                unsupported.append(queries.ref)
                continue
            merges.append(queries.merge + self.config.statement_padding)
            relationships.extend(queries.relationships)

        logger.info(
            f"Assembled {len(merges)} merge statements and "
            f"{len(relationships)} relationship statements from {len(parsed_ops)} writes"
        )

        return BatchResult(
            merge="".join(merges),
            relationship_statements=relationships,
            unsupported=unsupported,
        )


def ops_to_cypher(
    ops: Iterable[RawOp], config: Optional[CypherOpsConfig] = None
) -> BatchResult:
    """Turn a batch of change ops into Cypher statements.

    Executing the statements is left to the caller: run ``result.merge``
    first, then each of ``result.relationships``.

    Args:
        ops: Ops from the change feed
        config: Settings; read from environment variables if None

    Returns:
        BatchResult for the batch
    """
    return QueryAssembler(config).assemble(ops)
