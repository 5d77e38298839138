"""Relationship statements between a parent entity and the components it holds."""

import logging
import random
import string
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from cypherops.config import CypherOpsConfig
from cypherops.models import RelationshipStatement, ValueKind
from cypherops.parsing.classifier import (
    entity_kind,
    is_reference,
    reference_of,
    value_kind,
)
from cypherops.query import cypher

logger = logging.getLogger(__name__)


class VariableNameGenerator:
    """Generates random alphabetic query variable names, unique per instance."""

    def __init__(self, length: int = 12, rng: Optional[random.Random] = None) -> None:
        """Initialize the generator.

        Args:
            length: Number of characters per name
            rng: Random source; a seeded one makes names reproducible
        """
        if length < 1:
            raise ValueError(f"length must be at least 1, got {length}")
        self.length = length
        self.rng = rng or random.Random()
        self.used: Set[str] = set()

    def generate(self) -> str:
        """Return a name not handed out before by this generator."""
        while True:
            name = "".join(self.rng.choices(string.ascii_letters, k=self.length))
            if name not in self.used:
                self.used.add(name)
                return name


@dataclass
class ParentMatch:
    """Variable and MATCH clause bound to one parent ref."""

    var: str
    clause: str


@dataclass
class BatchContext:
    """Per-batch state: variable names and memoized parent matches.

    A new context is created for every batch, so parent matches and variable
    names never leak from one batch into another.
    """

    names: VariableNameGenerator = field(default_factory=VariableNameGenerator)
    escape_strings: bool = True
    parents: Dict[str, ParentMatch] = field(default_factory=dict)

    @classmethod
    def from_config(
        cls, config: CypherOpsConfig, rng: Optional[random.Random] = None
    ) -> "BatchContext":
        """Create a fresh context for one batch.

        Args:
            config: Settings for variable length and escaping
            rng: Optional random source for variable names

        Returns:
            Empty BatchContext
        """
        return cls(
            names=VariableNameGenerator(config.variable_length, rng),
            escape_strings=config.escape_strings,
        )

    def parent_match(self, parent_ref: str) -> ParentMatch:
        """Return the parent match for a ref, creating it on first use."""
        match = self.parents.get(parent_ref)
        if match is None:
            var = self.names.generate()
            clause = cypher.match_clause(
                var, entity_kind(parent_ref), parent_ref, escape=self.escape_strings
            )
            match = ParentMatch(var=var, clause=clause)
            self.parents[parent_ref] = match
            logger.debug(f"Matched parent {parent_ref} as {var}")
        return match


class RelationshipBuilder:
    """Builds COMPONENT relationship statements for property values.

    A value relates its parent to other components when it is an embedded
    component (an object with a '_ref' field), a component ref string, or an
    array holding either. Any other value produces no statements.
    """

    def __init__(self, context: BatchContext) -> None:
        self.context = context

    def related_refs(self, value: Any) -> List[str]:
        """Collect the child refs a value points at.

        Args:
            value: Decoded property value

        Returns:
            Child refs in order; non-reference array entries are dropped
        """
        if value_kind(value) == ValueKind.ARRAY:
            return [reference_of(entry) for entry in value if is_reference(entry)]
        if is_reference(value):
            return [reference_of(value)]
        return []

    def create_relationship(self, parent_ref: str, child_ref: str) -> RelationshipStatement:
        """Build the statement linking parent to child.

        Args:
            parent_ref: Ref of the page or component holding the child
            child_ref: Ref of the child component

        Returns:
            RelationshipStatement with a fresh child variable
        """
        parent = self.context.parent_match(parent_ref)
        child_var = self.context.names.generate()
        return RelationshipStatement(
            parent_ref=parent_ref,
            child_ref=child_ref,
            parent_var=parent.var,
            child_var=child_var,
            parent_match=parent.clause,
            child_match=cypher.component_match_clause(
                child_var, child_ref, escape=self.context.escape_strings
            ),
        )

    def build(self, parent_ref: str, value: Any) -> List[RelationshipStatement]:
        """Build every relationship statement a property value implies.

        Args:
            parent_ref: Ref of the op owning the property
            value: Decoded property value

        Returns:
            One statement per referenced child, possibly empty
        """
        return [
            self.create_relationship(parent_ref, child_ref)
            for child_ref in self.related_refs(value)
        ]


def build_relationships(
    parent_ref: str, value: Any, context: Optional[BatchContext] = None
) -> List[RelationshipStatement]:
    """Build relationship statements for one value.

    Args:
        parent_ref: Ref of the owning page or component
        value: Decoded property value
        context: Batch context to share parent matches with; a fresh one is
            used when omitted

    Returns:
        Relationship statements for the value
    """
    if context is None:
        context = BatchContext()
    return RelationshipBuilder(context).build(parent_ref, value)
