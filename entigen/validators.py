# File: entigen/validators.py
"""
Entigen - Workflow Validators
==============================
A pure-function validation pipeline over the models in ``entigen.models``.

Pydantic already guarantees the *shape* of a ``Workflow``.  This module
adds the semantic checks that must pass before relation resolution:
identifier legality, case-insensitive duplicate detection, relation target
existence, relation consistency, rule/type compatibility and ownership
cycle detection.

Every check appends to a ``ValidationResult`` instead of raising, so a
caller receives *all* problems of an input at once.

Usage by downstream modules:
    from entigen.validators import validate_full
    result = validate_full(workflow)
    if result.has_errors:
        ...
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Set, Tuple

import pydantic

from entigen.models import Cardinality, Property, Workflow
from entigen.resolver import pair_key, resolve_relations

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("entigen.validators")

# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationIssue:
    """One problem found in a workflow, tagged with where it was found."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "error" | "warning"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    @property
    def entity(self) -> Optional[str]:
        return self.context.get("entity")

    @property
    def relation(self) -> Optional[str]:
        return self.context.get("relation")

    # Last decorated member: the name shadows the builtin in the class body.
    @property
    def property(self) -> Optional[str]:
        return self.context.get("property")

    def __repr__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class ValidationResult:
    """
    Ordered accumulator of ``ValidationIssue`` instances.

    A result without errors is the "ok" report; warnings never block
    compilation.
    """

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationIssue] = []

    # -- Mutation -----------------------------------------------------------

    def add_error(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationIssue("error", code, message, context))

    def add_warning(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationIssue("warning", code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    # -- Query --------------------------------------------------------------

    @property
    def errors(self) -> List[ValidationIssue]:
        return [e for e in self._items if e.is_error]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [e for e in self._items if e.is_warning]

    @property
    def all_items(self) -> List[ValidationIssue]:
        return list(self._items)

    @property
    def has_errors(self) -> bool:
        return any(e.is_error for e in self._items)

    @property
    def error_count(self) -> int:
        return sum(1 for e in self._items if e.is_error)

    @property
    def warning_count(self) -> int:
        return sum(1 for e in self._items if e.is_warning)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    def codes(self) -> List[str]:
        """Error codes in report order."""
        return [e.code for e in self._items if e.is_error]

    def summary(self) -> str:
        return (
            f"Validation: {self.error_count} error(s), "
            f"{self.warning_count} warning(s)."
        )

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __bool__(self) -> bool:
        """Truthy when there are NO errors (i.e. valid)."""
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)

    def format_report(self) -> str:
        """Human-readable multi-line report."""
        lines: List[str] = [self.summary(), ""]
        for item in self._items:
            prefix: str = "✗" if item.is_error else "⚠"
            lines.append(f"  {prefix} [{item.code}] {item.message}")
            for key, value in item.context.items():
                lines.append(f"       {key}: {value}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Name tables
# ---------------------------------------------------------------------------

_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
# Prisma model and field names
_STORAGE_NAME_RE: re.Pattern[str] = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")

MAX_PROJECT_NAME_LENGTH: int = 50
MAX_ENTITIES: int = 20

# Reserved words of the generated TypeScript sources
_RESERVED_KEYWORDS: FrozenSet[str] = frozenset(
    {
        "abstract", "arguments", "await", "boolean", "break", "byte", "case",
        "catch", "char", "class", "const", "continue", "debugger", "default",
        "delete", "do", "double", "else", "enum", "eval", "export", "extends",
        "false", "final", "finally", "float", "for", "function", "goto", "if",
        "implements", "import", "in", "instanceof", "int", "interface", "let",
        "long", "native", "new", "null", "package", "private", "protected",
        "public", "return", "short", "static", "super", "switch",
        "synchronized", "this", "throw", "throws", "transient", "true", "try",
        "typeof", "var", "void", "volatile", "while", "with", "yield",
    }
)

# Built-in object members that generated classes and records must not shadow
_INFRASTRUCTURE_NAMES: FrozenSet[str] = frozenset(
    {"constructor", "prototype", "tostring", "valueof"}
)

# Members every generated model already has
_GENERATED_MEMBERS: FrozenSet[str] = frozenset({"id", "createdat", "updatedat"})

_SQL_RESERVED_WORDS: FrozenSet[str] = frozenset(
    {
        "select", "from", "where", "insert", "update", "delete", "create",
        "drop", "alter", "table", "database", "index", "view", "trigger",
        "procedure", "function", "user", "group", "order", "by", "having",
        "union", "join", "inner", "outer", "left", "right", "full", "cross",
        "on", "as", "and", "or", "not", "null", "is", "like", "between", "in",
        "exists", "any", "all", "some", "case", "when", "then", "else", "end",
        "cast", "convert", "count", "sum", "avg", "min", "max", "distinct",
    }
)

# Field types accepted by each rule family
_STRING_TYPES: FrozenSet[str] = frozenset({"string"})
_BOUNDABLE_TYPES: FrozenSet[str] = frozenset(
    {"number", "int", "float", "decimal", "bigint", "date", "datetime"}
)

_STRING_RULES: FrozenSet[str] = frozenset(
    {"minLength", "maxLength", "pattern", "email", "url", "uuid", "startsWith", "endsWith"}
)
_BOUND_RULES: FrozenSet[str] = frozenset({"min", "max"})

# Patterns are emitted as JavaScript regex literals
_PYTHON_ONLY_ESCAPES: FrozenSet[str] = frozenset({"A", "Z"})
_INLINE_FLAGS_RE: re.Pattern[str] = re.compile(r"\(\?[aiLmsux-]+[:)]")
_JS_NAMED_GROUP_RE: re.Pattern[str] = re.compile(r"\(\?<([A-Za-z_][A-Za-z0-9_]*)>")
_JS_NAMED_BACKREF_RE: re.Pattern[str] = re.compile(r"\\k<([A-Za-z_][A-Za-z0-9_]*)>")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _check_identifier(
    result: ValidationResult,
    name: str,
    kind: str,
    context: Dict[str, Any],
    *,
    sql_reserved: bool = False,
    storage_name: bool = False,
    generated_members: bool = False,
) -> None:
    """
    Append identifier problems for *name*.  *kind* is a label such as
    ``"Entity"`` used in messages.
    """
    if not name or not name.strip():
        result.add_error("EMPTY_NAME", f"{kind} name cannot be empty.", context)
        return

    if not _IDENTIFIER_RE.match(name):
        result.add_error(
            "INVALID_IDENTIFIER",
            f"{kind} name '{name}' must be a valid identifier "
            f"(letters, digits, '_' or '$', not starting with a digit).",
            context,
        )
        return

    if storage_name and not _STORAGE_NAME_RE.match(name):
        result.add_error(
            "INVALID_STORAGE_NAME",
            f"{kind} name '{name}' must start with a letter and contain only "
            f"letters, digits and '_' to be used in the database schema.",
            context,
        )

    lower: str = name.lower()
    if lower in _RESERVED_KEYWORDS:
        result.add_error(
            "RESERVED_KEYWORD",
            f"{kind} name '{name}' is a reserved keyword.",
            context,
        )
    if lower in _INFRASTRUCTURE_NAMES:
        result.add_error(
            "RESERVED_MEMBER_NAME",
            f"{kind} name '{name}' conflicts with a built-in object member.",
            context,
        )
    if generated_members and lower in _GENERATED_MEMBERS:
        result.add_error(
            "RESERVED_MEMBER_NAME",
            f"{kind} name '{name}' conflicts with a generated field.",
            context,
        )
    if sql_reserved and lower in _SQL_RESERVED_WORDS:
        result.add_error(
            "SQL_RESERVED_WORD",
            f"{kind} name '{name}' is a SQL reserved word.",
            context,
        )


def _entity_lookup(workflow: Workflow) -> Dict[str, str]:
    """Lower-cased entity name → first declared spelling."""
    lookup: Dict[str, str] = {}
    for entity in workflow.entities:
        lookup.setdefault(entity.name.lower(), entity.name)
    return lookup


# ---------------------------------------------------------------------------
# Individual validation functions
# ---------------------------------------------------------------------------


def validate_project(workflow: Workflow) -> ValidationResult:
    """Project name legality and entity count bounds."""
    result: ValidationResult = ValidationResult()
    ctx: Dict[str, Any] = {"project": workflow.name}

    _check_identifier(result, workflow.name, "Project", ctx)
    if len(workflow.name) > MAX_PROJECT_NAME_LENGTH:
        result.add_error(
            "PROJECT_NAME_TOO_LONG",
            f"Project name must be at most {MAX_PROJECT_NAME_LENGTH} characters "
            f"(got {len(workflow.name)}).",
            ctx,
        )

    if not workflow.entities:
        result.add_error("NO_ENTITIES", "A workflow needs at least one entity.", ctx)
    elif len(workflow.entities) > MAX_ENTITIES:
        result.add_error(
            "TOO_MANY_ENTITIES",
            f"A workflow may declare at most {MAX_ENTITIES} entities "
            f"(got {len(workflow.entities)}).",
            ctx,
        )
    return result


def validate_entity_names(workflow: Workflow) -> ValidationResult:
    """
    Entity names: legal identifiers, unique case-insensitively.

    A duplicate occurrence is reported once and not checked further.
    """
    result: ValidationResult = ValidationResult()
    seen: Dict[str, str] = {}

    for entity in workflow.entities:
        name: str = entity.name
        ctx: Dict[str, Any] = {"entity": name}

        if name and name.lower() in seen:
            result.add_error(
                "DUPLICATE_ENTITY_NAME",
                f"Entity name '{name}' duplicates '{seen[name.lower()]}' "
                f"(names are compared case-insensitively).",
                ctx,
            )
            continue
        seen[name.lower()] = name

        _check_identifier(result, name, "Entity", ctx, storage_name=True)

    logger.debug(
        "validate_entity_names: checked %d entities, %d issue(s).",
        len(workflow.entities),
        len(result),
    )
    return result


def validate_property_names(workflow: Workflow) -> ValidationResult:
    """Property names: legal identifiers, not SQL words, unique per entity."""
    result: ValidationResult = ValidationResult()

    for entity in workflow.entities:
        seen: Dict[str, str] = {}
        for prop in entity.properties:
            ctx: Dict[str, Any] = {"entity": entity.name, "property": prop.name}

            if prop.name and prop.name.lower() in seen:
                result.add_error(
                    "DUPLICATE_PROPERTY_NAME",
                    f"Property '{prop.name}' duplicates '{seen[prop.name.lower()]}' "
                    f"in entity '{entity.name}'.",
                    ctx,
                )
                continue
            seen[prop.name.lower()] = prop.name

            _check_identifier(
                result,
                prop.name,
                "Property",
                ctx,
                sql_reserved=True,
                generated_members=True,
                storage_name=True,
            )

    logger.debug("validate_property_names: %d issue(s).", len(result))
    return result


def _pattern_problem(pattern: str) -> Optional[str]:
    """
    Check *pattern* as a JavaScript regular expression.

    Constructs that only Python understands are rejected; JavaScript named
    groups and backreferences are rewritten to Python's spelling before
    compiling.  Returns a description of the problem, or None.
    """
    translated: List[str] = []
    i: int = 0
    while i < len(pattern):
        char: str = pattern[i]
        if char == "\\" and i + 1 < len(pattern):
            escape: str = pattern[i + 1]
            if escape in _PYTHON_ONLY_ESCAPES:
                return f"'\\{escape}' is not supported in JavaScript patterns"
            backref = _JS_NAMED_BACKREF_RE.match(pattern, i)
            if backref is not None:
                translated.append(f"(?P={backref.group(1)})")
                i = backref.end()
                continue
            translated.append(pattern[i:i + 2])
            i += 2
            continue
        if char == "(" and pattern.startswith("(?", i):
            if pattern.startswith("(?P", i):
                return "'(?P' groups are not supported in JavaScript patterns"
            if _INLINE_FLAGS_RE.match(pattern, i):
                return "inline flag groups are not supported in JavaScript patterns"
            named = _JS_NAMED_GROUP_RE.match(pattern, i)
            if named is not None:
                translated.append(f"(?P<{named.group(1)}>")
                i = named.end()
                continue
        translated.append(char)
        i += 1

    try:
        re.compile("".join(translated))
    except re.error as exc:
        return str(exc)
    return None


def _unencodable(value: str) -> bool:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return True
    return False


def _check_rules(
    result: ValidationResult, entity_name: str, prop: Property
) -> None:
    field_type: str = prop.type.lower()
    bounds: Dict[str, float] = {}

    for position, rule in enumerate(prop.validation):
        kind: str = rule.type
        ctx: Dict[str, Any] = {
            "entity": entity_name,
            "property": prop.name,
            "rule": kind,
            "position": position,
        }

        if kind in _STRING_RULES and field_type not in _STRING_TYPES:
            result.add_error(
                "INCOMPATIBLE_RULE",
                f"Rule '{kind}' on '{entity_name}.{prop.name}' requires a string "
                f"property, but the type is '{prop.type}'.",
                ctx,
            )
        elif kind in _BOUND_RULES and field_type not in _BOUNDABLE_TYPES:
            result.add_error(
                "INCOMPATIBLE_RULE",
                f"Rule '{kind}' on '{entity_name}.{prop.name}' requires a numeric "
                f"or date property, but the type is '{prop.type}'.",
                ctx,
            )

        if kind in ("minLength", "maxLength"):
            if rule.value < 0:
                result.add_error(
                    "INVALID_RULE_VALUE",
                    f"Rule '{kind}' on '{entity_name}.{prop.name}' must not be "
                    f"negative (got {rule.value}).",
                    ctx,
                )
            bounds[kind] = rule.value
        elif kind in ("min", "max"):
            bounds[kind] = rule.value
        elif kind == "pattern":
            if not rule.value:
                result.add_error(
                    "INVALID_RULE_VALUE",
                    f"Pattern on '{entity_name}.{prop.name}' cannot be empty.",
                    ctx,
                )
            else:
                problem: Optional[str] = _pattern_problem(rule.value)
                if problem is not None:
                    result.add_error(
                        "INVALID_PATTERN",
                        f"Pattern '{rule.value}' on '{entity_name}.{prop.name}' "
                        f"is not a valid regular expression: {problem}.",
                        ctx,
                    )
        elif kind == "enum":
            if not rule.values:
                result.add_error(
                    "EMPTY_ENUM",
                    f"Enum rule on '{entity_name}.{prop.name}' needs at least one value.",
                    ctx,
                )
            elif len(set(rule.values)) != len(rule.values):
                dupes: List[str] = sorted(
                    {v for v in rule.values if rule.values.count(v) > 1}
                )
                result.add_warning(
                    "DUPLICATE_ENUM_VALUE",
                    f"Enum rule on '{entity_name}.{prop.name}' repeats {dupes}.",
                    ctx,
                )
        elif kind in ("startsWith", "endsWith"):
            if not rule.value:
                result.add_error(
                    "INVALID_RULE_VALUE",
                    f"Rule '{kind}' on '{entity_name}.{prop.name}' needs a "
                    f"non-empty value.",
                    ctx,
                )
        elif kind == "custom":
            if not rule.validator.strip():
                result.add_error(
                    "EMPTY_CUSTOM_VALIDATOR",
                    f"Custom rule on '{entity_name}.{prop.name}' must name a validator.",
                    ctx,
                )

    for low, high in (("minLength", "maxLength"), ("min", "max")):
        if low in bounds and high in bounds and bounds[low] > bounds[high]:
            result.add_error(
                "CONFLICTING_BOUNDS",
                f"'{low}' ({bounds[low]}) exceeds '{high}' ({bounds[high]}) on "
                f"'{entity_name}.{prop.name}'.",
                {"entity": entity_name, "property": prop.name, "rule": low},
            )


def validate_rules(workflow: Workflow) -> ValidationResult:
    """
    Validation rules: compatible with the property type, well-formed
    values, compilable patterns, non-empty enums.
    """
    result: ValidationResult = ValidationResult()
    for entity in workflow.entities:
        for prop in entity.properties:
            _check_rules(result, entity.name, prop)
    logger.debug("validate_rules: %d issue(s).", len(result))
    return result


def validate_text_encoding(workflow: Workflow) -> ValidationResult:
    """
    Free-text values copied into generated sources (custom type tags and
    rule values) must be encodable as UTF-8, e.g. no lone surrogates.
    """
    result: ValidationResult = ValidationResult()
    for entity in workflow.entities:
        for prop in entity.properties:
            texts: List[Tuple[str, str]] = [("type", prop.type)]
            for rule in prop.validation:
                if rule.type == "enum":
                    texts.extend((rule.type, value) for value in rule.values)
                elif rule.type == "custom":
                    texts.append((rule.type, rule.validator))
                elif isinstance(getattr(rule, "value", None), str):
                    texts.append((rule.type, rule.value))

            for label, text in texts:
                if _unencodable(text):
                    result.add_error(
                        "INVALID_INPUT",
                        f"'{entity.name}.{prop.name}' {label} contains characters "
                        f"that cannot be encoded as UTF-8.",
                        {"entity": entity.name, "property": prop.name, "rule": label},
                    )
    return result


def validate_relation_targets(workflow: Workflow) -> ValidationResult:
    """Every relation target names a declared entity (any position)."""
    result: ValidationResult = ValidationResult()
    lookup: Dict[str, str] = _entity_lookup(workflow)

    for entity in workflow.entities:
        for relation in entity.relations:
            if relation.target.lower() not in lookup:
                result.add_error(
                    "UNKNOWN_RELATION_TARGET",
                    f"Entity '{entity.name}' has a {relation.cardinality} relation "
                    f"to '{relation.target}', which is not declared.",
                    {"entity": entity.name, "relation": relation.target},
                )
    return result


def validate_relation_consistency(workflow: Workflow) -> ValidationResult:
    """
    One relation per entity pair and side: no repeated targets within an
    entity, and reciprocal declarations must agree on cardinality and
    ownership.
    """
    result: ValidationResult = ValidationResult()
    lookup: Dict[str, str] = _entity_lookup(workflow)
    declarations: Dict[Tuple[str, str], Any] = {}
    reported_pairs: Set[frozenset] = set()

    for entity in workflow.entities:
        source: str = entity.name.lower()
        seen_targets: Set[str] = set()
        for relation in entity.relations:
            target: str = relation.target.lower()
            if target not in lookup:
                continue
            ctx: Dict[str, Any] = {"entity": entity.name, "relation": relation.target}

            if target in seen_targets:
                result.add_error(
                    "DUPLICATE_RELATION",
                    f"Entity '{entity.name}' declares more than one relation "
                    f"to '{relation.target}'.",
                    ctx,
                )
                continue
            seen_targets.add(target)
            declarations.setdefault((source, target), relation)

            if source == target:
                continue
            other = declarations.get((target, source))
            if other is None:
                continue

            key = pair_key(source, target)
            if key in reported_pairs:
                continue
            if other.cardinality != relation.cardinality:
                reported_pairs.add(key)
                result.add_error(
                    "CONFLICTING_RELATION",
                    f"'{lookup[target]}' declares a {other.cardinality} relation to "
                    f"'{entity.name}', but '{entity.name}' declares "
                    f"{relation.cardinality} back.",
                    ctx,
                )
            elif (
                relation.cardinality != Cardinality.MANY_TO_MANY
                and other.is_parent == relation.is_parent
            ):
                reported_pairs.add(key)
                side: str = "parent" if relation.is_parent else "child"
                result.add_error(
                    "CONFLICTING_RELATION",
                    f"Both '{lookup[target]}' and '{entity.name}' declare themselves "
                    f"the {side} of their {relation.cardinality} relation; exactly "
                    f"one side must set isParent.",
                    ctx,
                )
    return result


def validate_relation_field_collisions(workflow: Workflow) -> ValidationResult:
    """
    Resolved relation fields (declared and synthesized) must not clash with
    properties, generated members or each other.  Expects relation targets
    and consistency to have passed.
    """
    result: ValidationResult = ValidationResult()

    for resolved in resolve_relations(workflow):
        taken: Dict[str, str] = {name: "generated field" for name in _GENERATED_MEMBERS}
        for prop in resolved.properties:
            taken.setdefault(prop.name.lower(), f"property '{prop.name}'")

        for relation_field in resolved.relation_fields:
            names: List[str] = [relation_field.name]
            if relation_field.foreign_key:
                names.append(relation_field.foreign_key)
            for name in names:
                owner: Optional[str] = taken.get(name.lower())
                if owner is not None:
                    origin: str = (
                        "synthesized" if relation_field.synthesized else "declared"
                    )
                    result.add_error(
                        "RELATION_FIELD_COLLISION",
                        f"The {origin} relation field '{name}' of '{resolved.name}' "
                        f"(towards '{relation_field.target}') clashes with {owner}.",
                        {
                            "entity": resolved.name,
                            "relation": relation_field.target,
                            "field": name,
                        },
                    )
                    continue
                taken[name.lower()] = f"relation field '{name}'"
    return result


def validate_ownership_cycles(workflow: Workflow) -> ValidationResult:
    """
    Detect cycles among ownership edges with an iterative DFS.

    An edge ``A → B`` exists only for a one-to-one or one-to-many relation
    declared on A with ``isParent``.  Many-to-many relations, non-owning
    declarations and self-relations are not edges.  Each distinct cycle is
    reported once, with its full path.

    Complexity: O(E + R).
    """
    result: ValidationResult = ValidationResult()
    lookup: Dict[str, str] = _entity_lookup(workflow)

    adjacency: Dict[str, List[str]] = {name: [] for name in lookup}
    for entity in workflow.entities:
        source: str = entity.name.lower()
        for relation in entity.relations:
            target: str = relation.target.lower()
            if not relation.is_ownership_edge or target not in lookup or target == source:
                continue
            if target not in adjacency[source]:
                adjacency[source].append(target)

    white, grey, black = 0, 1, 2
    colour: Dict[str, int] = {name: white for name in lookup}
    reported: Set[Tuple[str, ...]] = set()

    for start in lookup:
        if colour[start] != white:
            continue

        path: List[str] = [start]
        stack: List[Tuple[str, int]] = [(start, 0)]
        colour[start] = grey

        while stack:
            node, next_index = stack[-1]
            neighbours: List[str] = adjacency[node]
            if next_index >= len(neighbours):
                stack.pop()
                path.pop()
                colour[node] = black
                continue

            stack[-1] = (node, next_index + 1)
            neighbour: str = neighbours[next_index]

            if colour[neighbour] == grey:
                cycle: List[str] = path[path.index(neighbour):]
                pivot: int = cycle.index(min(cycle))
                canonical_cycle: Tuple[str, ...] = tuple(cycle[pivot:] + cycle[:pivot])
                if canonical_cycle in reported:
                    continue
                reported.add(canonical_cycle)
                names: List[str] = [lookup[n] for n in cycle] + [lookup[neighbour]]
                result.add_error(
                    "CIRCULAR_OWNERSHIP",
                    f"Ownership cycle detected: {' → '.join(names)}. "
                    f"Foreign keys cannot be placed consistently.",
                    {"entity": names[0], "cycle": names},
                )
            elif colour[neighbour] == white:
                colour[neighbour] = grey
                path.append(neighbour)
                stack.append((neighbour, 0))

    if not reported:
        logger.debug("No ownership cycles detected.")
    return result


# ---------------------------------------------------------------------------
# Parse errors
# ---------------------------------------------------------------------------


def _describe_location(
    location: Tuple[Any, ...], raw: Optional[Mapping[str, Any]]
) -> Dict[str, Any]:
    """Turn a pydantic error location into entity/property names when possible."""
    ctx: Dict[str, Any] = {"location": ".".join(str(part) for part in location)}
    if raw is None or len(location) < 2 or location[0] not in ("workflows", "entities"):
        return ctx
    try:
        entity_raw: Any = raw[location[0]][location[1]]
        ctx["entity"] = entity_raw.get("name")
        if len(location) >= 4 and location[2] in ("props", "properties"):
            ctx["property"] = entity_raw[location[2]][location[3]].get("name")
        elif len(location) >= 4 and location[2] == "relations":
            relation_raw: Mapping[str, Any] = entity_raw["relations"][location[3]]
            ctx["relation"] = (
                relation_raw.get("targetEntityName")
                or relation_raw.get("target")
                or relation_raw.get("controller")
            )
    except (KeyError, IndexError, TypeError, AttributeError):
        pass
    return ctx


def result_from_parse_error(
    exc: pydantic.ValidationError, raw: Optional[Mapping[str, Any]] = None
) -> ValidationResult:
    """
    Convert a pydantic shape error into ``INVALID_INPUT`` issues so that
    malformed input is reported the same way as semantic problems.
    """
    result: ValidationResult = ValidationResult()
    for error in exc.errors():
        location: Tuple[Any, ...] = tuple(error.get("loc", ()))
        ctx: Dict[str, Any] = _describe_location(location, raw)
        result.add_error(
            "INVALID_INPUT",
            f"{ctx['location'] or 'input'}: {error.get('msg', 'invalid value')}",
            ctx,
        )
    return result


# ---------------------------------------------------------------------------
# Composite validation
# ---------------------------------------------------------------------------

ValidatorFn = Callable[[Workflow], ValidationResult]


def validate_relations(workflow: Workflow) -> ValidationResult:
    """
    Relation checks.  Field collisions are only computed once targets and
    reciprocal declarations are consistent.
    """
    result: ValidationResult = ValidationResult()
    result.merge(validate_relation_targets(workflow))
    result.merge(validate_relation_consistency(workflow))
    if not result.has_errors:
        result.merge(validate_relation_field_collisions(workflow))
    return result


def validate_full(workflow: Workflow) -> ValidationResult:
    """
    **Master validation entry point.**

    Runs every check and returns all issues, in a stable order: project,
    entity names, property names, rules, relations, ownership cycles.
    Never raises for a well-typed workflow.
    """
    logger.info(
        "Starting validation of '%s': %d entities.",
        workflow.name,
        len(workflow.entities),
    )

    result: ValidationResult = ValidationResult()
    validators: List[ValidatorFn] = [
        validate_project,
        validate_entity_names,
        validate_property_names,
        validate_rules,
        validate_text_encoding,
        validate_relations,
        validate_ownership_cycles,
    ]
    for validator_fn in validators:
        logger.debug("Running validator: %s", validator_fn.__name__)
        result.merge(validator_fn(workflow))

    if result.has_errors:
        logger.info("Validation FAILED: %s", result.summary())
    else:
        logger.info("Validation PASSED: %s", result.summary())
    return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ValidationIssue",
    "ValidationResult",
    "MAX_PROJECT_NAME_LENGTH",
    "MAX_ENTITIES",
    "validate_project",
    "validate_entity_names",
    "validate_property_names",
    "validate_rules",
    "validate_text_encoding",
    "validate_relation_targets",
    "validate_relation_consistency",
    "validate_relation_field_collisions",
    "validate_ownership_cycles",
    "validate_relations",
    "validate_full",
    "result_from_parse_error",
]

logger.debug("entigen.validators loaded: %d public symbols.", len(__all__))
