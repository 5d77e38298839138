"""Classification of refs and decoded payload values.

Refs are classified by substring containment of a marker segment, not by
parsing the path: any ref containing ``/pages/`` anywhere is a page.
"""

from typing import Any

from cypherops.models import EntityKind, ValueKind

PAGE_MARKER = "/pages/"
LIST_MARKER = "/lists/"
COMPONENT_MARKER = "/components/"
REF_FIELD = "_ref"


def is_page(ref: Any) -> bool:
    """Check ref for '/pages/'."""
    return isinstance(ref, str) and PAGE_MARKER in ref


def is_list(ref: Any) -> bool:
    """Check ref for '/lists/'."""
    return isinstance(ref, str) and LIST_MARKER in ref


def is_embedded_component(value: Any) -> bool:
    """Check if value is an object carrying a non-empty '_ref' field.

    Args:
        value: Decoded JSON value

    Returns:
        True for objects such as ``{"_ref": "/components/a", ...}``
    """
    return isinstance(value, dict) and bool(value.get(REF_FIELD))


def is_component_ref(value: Any) -> bool:
    """Check if value is a string containing '/components/'."""
    return isinstance(value, str) and COMPONENT_MARKER in value


def is_reference(value: Any) -> bool:
    """Check if value points at another component, embedded or by ref."""
    return is_embedded_component(value) or is_component_ref(value)


def reference_of(value: Any) -> str:
    """Return the ref a reference value points at.

    Args:
        value: Embedded component object or component ref string

    Returns:
        The object's '_ref' field, or the string itself

    Raises:
        ValueError: If value is not a reference
    """
    if is_embedded_component(value):
        return str(value[REF_FIELD])
    if is_component_ref(value):
        return value
    raise ValueError(f"Value is not a component reference: {value!r}")


def entity_kind(ref: str) -> EntityKind:
    """Classify a ref as page, list or component.

    Pages are checked first, so a ref containing both markers is a page.
    """
    if is_page(ref):
        return EntityKind.PAGE
    if is_list(ref):
        return EntityKind.LIST
    return EntityKind.COMPONENT


def value_kind(value: Any) -> ValueKind:
    """Classify a decoded JSON value.

    Args:
        value: Value produced by ``json.loads``

    Returns:
        ValueKind of the value

    Raises:
        TypeError: If value is not something JSON decoding produces
    """
    # bool is a subclass of int, so it has to be checked first
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if value is None:
        return ValueKind.NULL
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    if isinstance(value, dict):
        return ValueKind.OBJECT
    raise TypeError(f"Unsupported value type: {type(value).__name__}")


def may_relate(value: Any) -> bool:
    """Whether a property value can produce relationship statements.

    Arrays always qualify (their entries are inspected one by one); other
    values qualify only when they are references themselves.
    """
    return value_kind(value) == ValueKind.ARRAY or is_reference(value)
