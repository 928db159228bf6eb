# File: entigen/naming.py
"""
Entigen - Naming & Type-Mapping Engine
========================================
Stateless helpers shared by the validator, the relation resolver and every
artifact generator, so that a field name or type decided once is spelled
the same way in the storage schema, the runtime type and the validator.

Contents:
    - identifier casing (``capitalize``, ``to_camel_case``, ``to_kebab_case``,
      ``to_snake_case``) and English pluralisation (``pluralize``);
    - derived names (model, runtime type, relation fields, relation names);
    - field type mappings (``storage_type``, ``runtime_type``);
    - validation rule mapping (``constraint_expression``) and the composed
      per-property validator expression (``validator_expression``).

String helpers are cached with ``lru_cache``; they are called once per
entity per artifact.
"""

from __future__ import annotations

import functools
import logging
import re
from typing import Dict, FrozenSet, List

from entigen.models import Property, ValidationRule
from entigen.utils import js_number, js_regex, js_string

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("entigen.naming")

# ---------------------------------------------------------------------------
# Pre-compiled patterns
# ---------------------------------------------------------------------------

_LOWER_UPPER_RE: re.Pattern[str] = re.compile(r"([a-z])([A-Z])")


# ---------------------------------------------------------------------------
# Casing
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def capitalize(name: str) -> str:
    """
    Upper-case the first character only.

        >>> capitalize("orderItem")
        'OrderItem'
    """
    if not name:
        return ""
    return name[0].upper() + name[1:]


@functools.lru_cache(maxsize=None)
def to_camel_case(name: str) -> str:
    """
    Lower-case the first character only.  This is not a full camelCase
    normalisation: ``"Order_item"`` becomes ``"order_item"``.
    """
    if not name:
        return ""
    return name[0].lower() + name[1:]


@functools.lru_cache(maxsize=None)
def to_kebab_case(name: str) -> str:
    """``"orderItem"`` → ``"order-item"``."""
    return _LOWER_UPPER_RE.sub(r"\1-\2", name).lower()


@functools.lru_cache(maxsize=None)
def to_snake_case(name: str) -> str:
    """``"orderItem"`` → ``"order_item"``."""
    return _LOWER_UPPER_RE.sub(r"\1_\2", name).lower()


# ---------------------------------------------------------------------------
# Pluralisation
# ---------------------------------------------------------------------------

_IRREGULAR_PLURALS: Dict[str, str] = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
    "mouse": "mice",
    "goose": "geese",
    "tooth": "teeth",
    "foot": "feet",
    "ox": "oxen",
    "datum": "data",
    "index": "indices",
    "matrix": "matrices",
    "vertex": "vertices",
    "axis": "axes",
    "crisis": "crises",
    "analysis": "analyses",
    "thesis": "theses",
    "status": "statuses",
    "address": "addresses",
    "quiz": "quizzes",
    "bus": "buses",
    "alias": "aliases",
    "campus": "campuses",
}

_UNCOUNTABLE: FrozenSet[str] = frozenset({
    "equipment", "information", "rice", "money", "species", "series",
    "fish", "sheep", "deer", "news", "data", "feedback", "metadata",
    "software", "hardware", "staff", "inventory",
})

# Words ending in "f"/"fe" that take a plain "s"
_F_TAKES_S: FrozenSet[str] = frozenset({
    "roof", "chief", "belief", "proof", "chef", "cliff", "safe", "giraffe",
})

# Words ending in consonant + "o" that take a plain "s"
_O_TAKES_S: FrozenSet[str] = frozenset({
    "photo", "piano", "memo", "logo", "video", "radio", "studio", "zero",
    "demo", "promo", "todo", "repo",
})


def _match_case(source: str, replacement: str) -> str:
    if source[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


def _last_word_start(name: str) -> int:
    """Index where the trailing word of a camelCase/snake_case name starts."""
    for idx in range(len(name) - 1, 0, -1):
        if name[idx].isupper() or name[idx - 1] in "_-":
            return idx
    return 0


@functools.lru_cache(maxsize=None)
def pluralize(name: str) -> str:
    """
    English pluralisation of the trailing word of an identifier.

        >>> pluralize("order")
        'orders'
        >>> pluralize("category")
        'categories'
        >>> pluralize("orderItem")
        'orderItems'
        >>> pluralize("person")
        'people'

    Names that already end in a plural ``s`` are returned unchanged.
    """
    if not name:
        return ""

    split: int = _last_word_start(name)
    head: str = name[:split]
    word: str = name[split:]
    lower: str = word.lower()

    if lower in _UNCOUNTABLE:
        return name
    if lower in _IRREGULAR_PLURALS:
        return head + _match_case(word, _IRREGULAR_PLURALS[lower])

    # Already plural-looking
    if lower.endswith("s") and not lower.endswith(("ss", "us", "is")):
        return name

    if lower.endswith("is"):
        return name[:-2] + "es"
    if lower.endswith(("sh", "ch", "x", "z", "ss", "us")):
        return name + "es"
    if lower.endswith("y") and len(word) > 1 and lower[-2] not in "aeiou":
        return name[:-1] + "ies"
    if lower in _F_TAKES_S:
        return name + "s"
    if lower.endswith("fe"):
        return name[:-2] + "ves"
    if lower.endswith("f") and not lower.endswith("ff"):
        return name[:-1] + "ves"
    if (
        lower.endswith("o")
        and len(word) > 1
        and lower[-2] not in "aeiou"
        and lower not in _O_TAKES_S
    ):
        return name + "es"

    return name + "s"


# ---------------------------------------------------------------------------
# Derived names
# ---------------------------------------------------------------------------


def model_name(entity_name: str) -> str:
    """Storage model / class name of an entity."""
    return capitalize(entity_name)


def type_name(entity_name: str) -> str:
    """Name of the generated runtime type."""
    return f"{capitalize(entity_name)}Type"


def schema_name(entity_name: str) -> str:
    """Name of the generated request-validator object."""
    return f"{to_camel_case(entity_name)}Schema"


def update_schema_name(entity_name: str) -> str:
    return f"update{capitalize(entity_name)}Schema"


def reference_field_name(target: str) -> str:
    """Single-reference relation field: ``user``."""
    return to_camel_case(target)


def collection_field_name(target: str) -> str:
    """Collection relation field: ``orders``."""
    return pluralize(to_camel_case(target))


def parent_field_name(target: str) -> str:
    """Foreign-key side of a self-relation: ``parentCategory``."""
    return f"parent{capitalize(target)}"


def related_collection_name(target: str) -> str:
    """Reciprocal side of a many-to-many self-relation: ``relatedTags``."""
    return f"related{capitalize(pluralize(target))}"


def foreign_key_column(field_name: str) -> str:
    """Scalar column backing a reference field: ``user`` → ``userId``."""
    return f"{field_name}Id"


def relation_name(entity_a: str, entity_b: str) -> str:
    """
    Shared name of a relation between two entities, stable regardless of
    which side asks: ``relation_name("user", "order") == "OrderToUser"``.
    """
    first, second = sorted((model_name(entity_a), model_name(entity_b)))
    return f"{first}To{second}"


# ---------------------------------------------------------------------------
# Field type mappings
# ---------------------------------------------------------------------------

_STORAGE_TYPE_MAP: Dict[str, str] = {
    "string": "String",
    "number": "Int",
    "int": "Int",
    "float": "Float",
    "boolean": "Boolean",
    "date": "DateTime",
    "datetime": "DateTime",
    "json": "Json",
    "bytes": "Bytes",
    "decimal": "Decimal",
    "bigint": "BigInt",
}

STORAGE_FALLBACK_TYPE: str = "String"

_RUNTIME_TYPE_MAP: Dict[str, str] = {
    "string": "string",
    "number": "number",
    "boolean": "boolean",
    "bigint": "bigint",
    "symbol": "symbol",
    "undefined": "undefined",
    "null": "null",
    "any": "any",
    "unknown": "unknown",
    "void": "void",
    "never": "never",
    "object": "Record<string, any>",
    "array": "any[]",
    "function": "(...args: any[]) => any",
    "date": "Date",
    "datetime": "Date",
    "json": "Record<string, any>",
    "int": "number",
    "float": "number",
    "decimal": "number",
    "bytes": "Buffer",
}

_VALIDATOR_BASE_MAP: Dict[str, str] = {
    "string": "z.string()",
    "number": "z.number()",
    "int": "z.number().int()",
    "float": "z.number()",
    "decimal": "z.number()",
    "bigint": "z.bigint()",
    "boolean": "z.boolean()",
    "date": "z.coerce.date()",
    "datetime": "z.coerce.date()",
    "json": "z.record(z.any())",
    "object": "z.record(z.any())",
    "array": "z.array(z.any())",
}

VALIDATOR_FALLBACK_EXPRESSION: str = "z.any()"


@functools.lru_cache(maxsize=None)
def storage_type(field_type: str) -> str:
    """
    Storage column type for a field type tag.  Unrecognised tags,
    including custom ones, are stored as ``String``.
    """
    return _STORAGE_TYPE_MAP.get(field_type.lower(), STORAGE_FALLBACK_TYPE)


@functools.lru_cache(maxsize=None)
def runtime_type(field_type: str) -> str:
    """
    Runtime (TypeScript) type expression for a field type tag.  Custom tags
    are emitted verbatim.
    """
    return _RUNTIME_TYPE_MAP.get(field_type.lower(), field_type)


# ---------------------------------------------------------------------------
# Validation rule mapping
# ---------------------------------------------------------------------------


def constraint_expression(rule: ValidationRule) -> str:
    """
    Validator-schema fragment for one rule.

    Length, bound, pattern, format and affix rules return a chainable
    suffix such as ``.min(3)``.  ``enum`` returns a complete expression
    (``z.enum([...])``) which replaces whatever was built before it.
    ``custom`` contributes nothing: its validator name is opaque.
    """
    kind: str = rule.type
    if kind in ("minLength", "min"):
        return f".min({js_number(rule.value)})"
    if kind in ("maxLength", "max"):
        return f".max({js_number(rule.value)})"
    if kind == "pattern":
        return f".regex({js_regex(rule.value)})"
    if kind == "email":
        return ".email()"
    if kind == "url":
        return ".url()"
    if kind == "uuid":
        return ".uuid()"
    if kind == "startsWith":
        return f".startsWith({js_string(rule.value)})"
    if kind == "endsWith":
        return f".endsWith({js_string(rule.value)})"
    if kind == "enum":
        values: str = ", ".join(js_string(v) for v in rule.values)
        return f"z.enum([{values}])"
    if kind == "custom":
        return ""
    raise ValueError(f"Unhandled validation rule type: {kind!r}")


def validator_expression(prop: Property) -> str:
    """
    Full validator expression for a property: the base expression for its
    type, then each rule fragment in declaration order, then
    ``.nullable()`` when the property is nullable.

        >>> validator_expression(Property(name="age", type="number",
        ...     validation=[{"type": "min", "value": 0}]))
        'z.number().min(0)'
    """
    expression: str = _VALIDATOR_BASE_MAP.get(
        prop.type.lower(), VALIDATOR_FALLBACK_EXPRESSION
    )
    for rule in prop.validation:
        fragment: str = constraint_expression(rule)
        if rule.type == "enum":
            expression = fragment
        else:
            expression += fragment
    if prop.nullable:
        expression += ".nullable()"
    return expression


def custom_validators(prop: Property) -> List[str]:
    """Names recorded by ``custom`` rules, in declaration order."""
    return [rule.validator for rule in prop.validation if rule.type == "custom"]


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "capitalize",
    "to_camel_case",
    "to_kebab_case",
    "to_snake_case",
    "pluralize",
    "model_name",
    "type_name",
    "schema_name",
    "update_schema_name",
    "reference_field_name",
    "collection_field_name",
    "parent_field_name",
    "related_collection_name",
    "foreign_key_column",
    "relation_name",
    "STORAGE_FALLBACK_TYPE",
    "VALIDATOR_FALLBACK_EXPRESSION",
    "storage_type",
    "runtime_type",
    "constraint_expression",
    "validator_expression",
    "custom_validators",
]

logger.debug("entigen.naming loaded: %d public symbols.", len(__all__))
