"""Cypher text construction.

Every piece of user data that ends up in statement text passes through
``quote`` or ``format_key``, so escaping is decided in this module only.
"""

import json
import re
from typing import Any

from cypherops.models import EntityKind

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
DOUBLE_QUOTE = '"'


def escape_string(text: str, quote_char: str = "'") -> str:
    """Escape text for use inside a Cypher string literal.

    Args:
        text: Raw text
        quote_char: Quote character enclosing the literal

    Returns:
        Text with backslashes and the quote character backslash-escaped
    """
    return text.replace("\\", "\\\\").replace(quote_char, f"\\{quote_char}")


def quote(text: str, quote_char: str = "'", escape: bool = True) -> str:
    """Wrap text in quotes, escaping it unless disabled."""
    body = escape_string(text, quote_char) if escape else text
    return f"{quote_char}{body}{quote_char}"


def format_key(name: str, escape: bool = True) -> str:
    """Format a property name for a map literal.

    Names that are not plain identifiers are backtick-quoted when escaping.
    """
    if not escape or _IDENTIFIER.match(name):
        return name
    return "`" + name.replace("`", "``") + "`"


def normalize_numbers(value: Any) -> Any:
    """Turn integral floats into ints, recursively.

    The documents were encoded by a JavaScript writer, which prints ``1.0``
    as ``1``. Floats from 1e21 up keep their exponent form there, so they
    are left alone.
    """
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e21:
            return int(value)
        return value
    if isinstance(value, dict):
        return {key: normalize_numbers(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize_numbers(item) for item in value]
    return value


def property_text(value: Any) -> str:
    """Stringify a property value.

    Strings are used verbatim; everything else is compact JSON, matching the
    encoding the documents are stored with.
    """
    if isinstance(value, str):
        return value
    return json.dumps(normalize_numbers(value), separators=(",", ":"), ensure_ascii=False)


def format_property(name: str, value: Any, escape: bool = True) -> str:
    """Build a ``name: 'value'`` assignment for a property map."""
    return f"{format_key(name, escape)}: {quote(property_text(value), escape=escape)}"


def node_label(kind: EntityKind) -> str:
    """Node label and key property used for an entity kind."""
    if kind == EntityKind.PAGE:
        return "Page"
    return "Component"


def node_key(kind: EntityKind) -> str:
    if kind == EntityKind.PAGE:
        return "uri"
    return "_ref"


def merge_statement(
    kind: EntityKind, ref: str, index: int, properties: str, escape: bool = True
) -> str:
    """Build the MERGE statement upserting one node.

    Args:
        kind: Page or component
        ref: Ref of the node
        index: Op position, used for the node variable
        properties: Joined property assignments
        escape: Whether to escape the ref

    Returns:
        MERGE statement setting the same properties on match and on create

    Raises:
        ValueError: For list refs, which have no node schema
    """
    quoted_ref = quote(ref, escape=escape)
    if kind == EntityKind.PAGE:
        var = f"p{index}"
        node = f"({var}:Page {{uri: {quoted_ref}}})"
    elif kind == EntityKind.COMPONENT:
        var = f"c{index}"
        node = f"({var}:Component {{_ref: {quoted_ref} }})"
    else:
        raise ValueError(f"No merge statement for {kind.value} refs: {ref}")

    return (
        f"MERGE {node} ON MATCH SET {var} += {{{properties} }} "
        f"ON CREATE SET {var} += {{{properties} }}"
    )


def match_clause(var: str, kind: EntityKind, ref: str, escape: bool = True) -> str:
    """Build the MATCH clause used as relationship parent."""
    return (
        f"MATCH ({var}:{node_label(kind)} "
        f"{{{node_key(kind)}: {quote(ref, quote_char=DOUBLE_QUOTE, escape=escape)}}})"
    )


def component_match_clause(var: str, ref: str, escape: bool = True) -> str:
    """Build the MATCH clause selecting a child component."""
    return (
        f"MATCH ({var}:Component "
        f"{{_ref: {quote(ref, quote_char=DOUBLE_QUOTE, escape=escape)}}} )"
    )
