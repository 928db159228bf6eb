# File: entigen/resolver.py
"""
Entigen - Relation Resolver
============================
Turns a validated ``Workflow`` into one immutable ``ResolvedEntity`` per
entity, deciding for every relation which side carries the foreign key and
how each side represents it:

    ============  =============================  ================================
    cardinality   owner side (isParent)          other side
    ============  =============================  ================================
    one-to-one    optional reference, no column  reference + unique FK column
    one-to-many   collection (pluralised name)   reference + FK column
    many-to-many  collection                     collection
    ============  =============================  ================================

A relation only needs to be declared on one side; the mirrored field on the
target entity is synthesized here.  When both sides declare the same
relation the two declarations collapse into one.

The input models are never modified: resolution builds new frozen
dataclasses, so the step can be tested in isolation and re-run with
identical results.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

from entigen.models import Cardinality, Property, Relation, Workflow
from entigen.naming import (
    collection_field_name,
    foreign_key_column,
    model_name,
    parent_field_name,
    pluralize,
    reference_field_name,
    related_collection_name,
    relation_name,
    to_camel_case,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("entigen.resolver")


# ---------------------------------------------------------------------------
# Resolved data structures
# ---------------------------------------------------------------------------


class FieldKind(str, Enum):
    """Physical representation of one side of a relation."""

    REFERENCE = "reference"
    FOREIGN_KEY = "foreign_key"
    COLLECTION = "collection"


@dataclass(frozen=True, slots=True)
class RelationField:
    """One relation-backed field of a resolved entity."""

    name: str
    target: str
    target_model: str
    kind: FieldKind
    cardinality: Cardinality
    relation_name: str
    foreign_key: Optional[str] = None
    unique: bool = False
    optional: bool = False
    synthesized: bool = False
    self_relation: bool = False

    @property
    def is_collection(self) -> bool:
        return self.kind == FieldKind.COLLECTION

    @property
    def carries_foreign_key(self) -> bool:
        return self.kind == FieldKind.FOREIGN_KEY

    def __repr__(self) -> str:
        origin: str = "synth" if self.synthesized else "decl"
        return f"<RelationField {self.name} {self.kind.value} → {self.target} ({origin})>"


@dataclass(frozen=True, slots=True)
class ResolvedEntity:
    """
    An entity after relation resolution.

    ``properties`` are the declared scalar fields in declaration order;
    ``relation_fields`` lists declared relation fields first, then the
    synthesized reciprocal ones.
    """

    name: str
    model_name: str
    variable_name: str
    plural_name: str
    index: int
    properties: Tuple[Property, ...]
    relation_fields: Tuple[RelationField, ...]

    @property
    def has_validator(self) -> bool:
        return len(self.properties) > 0

    @property
    def foreign_key_fields(self) -> Tuple[RelationField, ...]:
        return tuple(f for f in self.relation_fields if f.carries_foreign_key)

    @property
    def collection_fields(self) -> Tuple[RelationField, ...]:
        return tuple(f for f in self.relation_fields if f.is_collection)

    @property
    def synthesized_fields(self) -> Tuple[RelationField, ...]:
        return tuple(f for f in self.relation_fields if f.synthesized)

    def field(self, name: str) -> Optional[RelationField]:
        for relation_field in self.relation_fields:
            if relation_field.name == name:
                return relation_field
        return None

    def member_names(self) -> List[str]:
        """Every generated member name: properties, relation fields, FK columns."""
        names: List[str] = [p.name for p in self.properties]
        for relation_field in self.relation_fields:
            names.append(relation_field.name)
            if relation_field.foreign_key:
                names.append(relation_field.foreign_key)
        return names


# ---------------------------------------------------------------------------
# Field planning for one relation
# ---------------------------------------------------------------------------

PairKey = FrozenSet[str]


def pair_key(entity_a: str, entity_b: str) -> PairKey:
    """Unordered, case-insensitive key of the relation between two entities."""
    return frozenset({entity_a.lower(), entity_b.lower()})


def plan_relation_fields(
    declaring: str, target: str, relation: Relation
) -> List[Tuple[str, RelationField]]:
    """
    Compute both sides of one relation.

    Args:
        declaring: canonical name of the entity declaring ``relation``.
        target: canonical name of the target entity.
        relation: the declaration.

    Returns:
        ``[(declaring, field_on_declaring), (target, field_on_target)]``;
        the second field is flagged ``synthesized``.
    """
    cardinality: Cardinality = Cardinality(relation.cardinality)
    is_self: bool = declaring.lower() == target.lower()
    shared_name: str = relation_name(declaring, target)

    if cardinality == Cardinality.MANY_TO_MANY:
        near: RelationField = RelationField(
            name=collection_field_name(target),
            target=target,
            target_model=model_name(target),
            kind=FieldKind.COLLECTION,
            cardinality=cardinality,
            relation_name=shared_name,
            self_relation=is_self,
        )
        far_name: str = (
            related_collection_name(declaring)
            if is_self
            else collection_field_name(declaring)
        )
        far: RelationField = RelationField(
            name=far_name,
            target=declaring,
            target_model=model_name(declaring),
            kind=FieldKind.COLLECTION,
            cardinality=cardinality,
            relation_name=shared_name,
            synthesized=True,
            self_relation=is_self,
        )
        return [(declaring, near), (target, far)]

    parent: str = declaring if relation.is_parent else target
    child: str = target if relation.is_parent else declaring

    if cardinality == Cardinality.ONE_TO_ONE:
        parent_side: RelationField = RelationField(
            name=reference_field_name(child),
            target=child,
            target_model=model_name(child),
            kind=FieldKind.REFERENCE,
            cardinality=cardinality,
            relation_name=shared_name,
            optional=True,
            self_relation=is_self,
        )
    else:
        parent_side = RelationField(
            name=collection_field_name(child),
            target=child,
            target_model=model_name(child),
            kind=FieldKind.COLLECTION,
            cardinality=cardinality,
            relation_name=shared_name,
            self_relation=is_self,
        )

    child_field_name: str = (
        parent_field_name(parent) if is_self else reference_field_name(parent)
    )
    child_side: RelationField = RelationField(
        name=child_field_name,
        target=parent,
        target_model=model_name(parent),
        kind=FieldKind.FOREIGN_KEY,
        cardinality=cardinality,
        relation_name=shared_name,
        foreign_key=foreign_key_column(child_field_name),
        unique=cardinality == Cardinality.ONE_TO_ONE,
        optional=is_self,
        self_relation=is_self,
    )

    if relation.is_parent:
        return [
            (declaring, parent_side),
            (target, dataclasses.replace(child_side, synthesized=True)),
        ]
    return [
        (declaring, child_side),
        (target, dataclasses.replace(parent_side, synthesized=True)),
    ]


# ---------------------------------------------------------------------------
# Whole-workflow resolution
# ---------------------------------------------------------------------------


def resolve_relations(workflow: Workflow) -> List[ResolvedEntity]:
    """
    Resolve every relation of *workflow*.

    Total on validated input.  Relations whose target does not exist, and
    repeated declarations of an already-resolved pair, are skipped (the
    validator reports both before this function is ever reached in the
    compiler).

    Complexity: O(E + R) where E = entities, R = declared relations.
    """
    canonical: Dict[str, str] = {}
    first_index: Dict[str, int] = {}
    for index, entity in enumerate(workflow.entities):
        canonical.setdefault(entity.name.lower(), entity.name)
        first_index.setdefault(entity.name.lower(), index)

    # Pass 1: plan each entity pair once, in first-declaration order.
    pair_order: List[PairKey] = []
    planned: Dict[PairKey, List[Tuple[str, RelationField]]] = {}
    declared_by: Dict[PairKey, Set[str]] = {}

    for entity in workflow.entities:
        for relation in entity.relations:
            target: Optional[str] = canonical.get(relation.target.lower())
            if target is None:
                logger.debug(
                    "Skipping relation %s → %s: unknown target.",
                    entity.name,
                    relation.target,
                )
                continue
            key: PairKey = pair_key(entity.name, target)
            declared_by.setdefault(key, set()).add(entity.name.lower())
            if key in planned:
                continue
            pair_order.append(key)
            planned[key] = plan_relation_fields(
                canonical[entity.name.lower()], target, relation
            )

    # Pass 2: a reciprocal field counts as declared when its owner also
    # declares the pair.
    fields_by_owner: Dict[str, List[Tuple[PairKey, RelationField]]] = {}
    for key in pair_order:
        is_self: bool = len(key) == 1
        for owner, relation_field in planned[key]:
            if (
                relation_field.synthesized
                and not is_self
                and owner.lower() in declared_by[key]
            ):
                relation_field = dataclasses.replace(relation_field, synthesized=False)
            fields_by_owner.setdefault(owner.lower(), []).append((key, relation_field))

    # Pass 3: assemble, declared fields in the entity's own order first.
    resolved: List[ResolvedEntity] = []
    for index, entity in enumerate(workflow.entities):
        owned: List[Tuple[PairKey, RelationField]] = fields_by_owner.get(
            entity.name.lower(), []
        )
        if first_index[entity.name.lower()] != index:
            # Duplicate declaration of an entity name: the first one owns
            # the relations.
            owned = []

        declared: List[RelationField] = []
        used: Set[int] = set()
        for relation in entity.relations:
            target = canonical.get(relation.target.lower())
            if target is None:
                continue
            key = pair_key(entity.name, target)
            for position, (owned_key, relation_field) in enumerate(owned):
                if position in used or owned_key != key or relation_field.synthesized:
                    continue
                declared.append(relation_field)
                used.add(position)
                break

        synthesized: List[RelationField] = [
            relation_field
            for position, (_, relation_field) in enumerate(owned)
            if position not in used
        ]

        resolved.append(
            ResolvedEntity(
                name=entity.name,
                model_name=model_name(entity.name),
                variable_name=to_camel_case(entity.name),
                plural_name=pluralize(to_camel_case(entity.name)),
                index=index,
                properties=tuple(entity.properties),
                relation_fields=tuple(declared + synthesized),
            )
        )

    logger.info(
        "Resolved %d entities, %d relation pairs.", len(resolved), len(pair_order)
    )
    return resolved


def resolved_by_name(entities: List[ResolvedEntity]) -> Dict[str, ResolvedEntity]:
    """Index resolved entities by lower-cased name."""
    return {entity.name.lower(): entity for entity in entities}


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "FieldKind",
    "RelationField",
    "ResolvedEntity",
    "pair_key",
    "plan_relation_fields",
    "resolve_relations",
    "resolved_by_name",
]

logger.debug("entigen.resolver loaded: %d public symbols.", len(__all__))
