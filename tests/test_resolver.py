"""
tests/test_resolver.py
Unit tests for entigen.resolver: which side of a relation carries the
foreign key, how each side is named, and reciprocal field synthesis.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List

from entigen.models import Cardinality, Relation, Workflow
from entigen.resolver import (
    FieldKind,
    ResolvedEntity,
    pair_key,
    plan_relation_fields,
    resolve_relations,
    resolved_by_name,
)


def _resolve(raw: Dict[str, Any]) -> Dict[str, ResolvedEntity]:
    workflow = Workflow.model_validate({k: v for k, v in raw.items() if k != "config"})
    return resolved_by_name(resolve_relations(workflow))


def _field_names(entity: ResolvedEntity) -> List[str]:
    return [f.name for f in entity.relation_fields]


# ===========================================================================
# Single relation planning
# ===========================================================================


class TestPlanRelationFields:
    """Both sides of one declaration."""

    def test_pair_key_is_unordered(self) -> None:
        assert pair_key("User", "order") == pair_key("order", "user")

    def test_child_declared_one_to_many(self) -> None:
        relation = Relation(target="user", cardinality="one-to-many")
        (owner_a, near), (owner_b, far) = plan_relation_fields("order", "user", relation)
        assert (owner_a, owner_b) == ("order", "user")
        assert near.kind == FieldKind.FOREIGN_KEY
        assert near.foreign_key == "userId"
        assert far.kind == FieldKind.COLLECTION
        assert far.name == "orders"
        assert far.synthesized and not near.synthesized

    def test_parent_declared_one_to_one(self) -> None:
        relation = Relation(target="profile", cardinality="one-to-one", is_parent=True)
        (_, near), (_, far) = plan_relation_fields("user", "profile", relation)
        assert near.kind == FieldKind.REFERENCE
        assert near.optional
        assert far.kind == FieldKind.FOREIGN_KEY
        assert far.foreign_key == "userId"
        assert far.unique


# ===========================================================================
# Whole-workflow resolution
# ===========================================================================


class TestResolveShop:
    """The two-entity end-to-end example."""

    def test_one_to_many_from_child(self, shop_dict: Dict[str, Any]) -> None:
        resolved = _resolve(shop_dict)
        user, order = resolved["user"], resolved["order"]

        orders = user.field("orders")
        assert orders is not None
        assert orders.kind == FieldKind.COLLECTION
        assert orders.synthesized
        assert orders.relation_name == "OrderToUser"

        ref = order.field("user")
        assert ref is not None
        assert ref.carries_foreign_key
        assert ref.foreign_key == "userId"
        assert not ref.unique
        assert not ref.synthesized
        assert ref.relation_name == "OrderToUser"

    def test_entity_names(self, shop_dict: Dict[str, Any]) -> None:
        order = _resolve(shop_dict)["order"]
        assert order.model_name == "Order"
        assert order.variable_name == "order"
        assert order.plural_name == "orders"
        assert not order.has_validator

    def test_both_sides_declared_collapse(self, shop_dict: Dict[str, Any]) -> None:
        data = copy.deepcopy(shop_dict)
        data["workflows"][0]["relations"] = [
            {"targetEntityName": "order", "cardinality": "one-to-many", "isParent": True}
        ]
        resolved = _resolve(data)
        assert _field_names(resolved["user"]) == ["orders"]
        assert _field_names(resolved["order"]) == ["user"]
        assert not resolved["user"].synthesized_fields
        assert not resolved["order"].synthesized_fields

    def test_unknown_target_skipped(self, dangling_relation_dict: Dict[str, Any]) -> None:
        assert _resolve(dangling_relation_dict)["order"].relation_fields == ()


class TestResolveReferenceWorkflow:
    """Every cardinality plus self-relations, from workflow_example.yaml."""

    def test_one_to_one(self, workflow_dict: Dict[str, Any]) -> None:
        resolved = _resolve(workflow_dict)
        profile = resolved["user"].field("profile")
        assert profile is not None and profile.kind == FieldKind.REFERENCE

        user = resolved["profile"].field("user")
        assert user is not None
        assert user.foreign_key == "userId"
        assert user.unique
        assert user.synthesized

    def test_many_to_many_is_symmetric(self, workflow_dict: Dict[str, Any]) -> None:
        resolved = _resolve(workflow_dict)
        orders = resolved["product"].field("orders")
        products = resolved["order"].field("products")
        assert orders is not None and products is not None
        assert orders.is_collection and products.is_collection
        assert orders.foreign_key is None and products.foreign_key is None
        assert orders.relation_name == products.relation_name == "OrderToProduct"
        assert products.cardinality == Cardinality.MANY_TO_MANY

    def test_self_relation(self, workflow_dict: Dict[str, Any]) -> None:
        category = _resolve(workflow_dict)["category"]
        assert _field_names(category) == ["categories", "products", "parentCategory"]

        parent = category.field("parentCategory")
        assert parent is not None
        assert parent.foreign_key == "parentCategoryId"
        assert parent.optional
        assert parent.self_relation
        assert parent.relation_name == "CategoryToCategory"

    def test_declared_fields_come_first(self, workflow_dict: Dict[str, Any]) -> None:
        resolved = _resolve(workflow_dict)
        assert _field_names(resolved["order"]) == ["user", "products"]
        assert _field_names(resolved["product"]) == ["orders", "category"]
        assert _field_names(resolved["user"]) == ["profile", "orders"]

    def test_member_names(self, workflow_dict: Dict[str, Any]) -> None:
        product = _resolve(workflow_dict)["product"]
        assert product.member_names() == [
            "title",
            "price",
            "sku",
            "orders",
            "category",
            "categoryId",
        ]

    def test_entity_order_preserved(self, workflow_dict: Dict[str, Any]) -> None:
        workflow = Workflow.model_validate(
            {k: v for k, v in workflow_dict.items() if k != "config"}
        )
        resolved = resolve_relations(workflow)
        assert [e.name for e in resolved] == workflow.entity_names
        assert [e.index for e in resolved] == list(range(len(resolved)))


class TestResolverPurity:
    """Resolution never touches its input and is repeatable."""

    def test_idempotent(self, workflow_dict: Dict[str, Any]) -> None:
        workflow = Workflow.model_validate(
            {k: v for k, v in workflow_dict.items() if k != "config"}
        )
        assert resolve_relations(workflow) == resolve_relations(workflow)

    def test_input_unchanged(self, workflow_dict: Dict[str, Any]) -> None:
        workflow = Workflow.model_validate(
            {k: v for k, v in workflow_dict.items() if k != "config"}
        )
        before = workflow.model_dump()
        resolve_relations(workflow)
        assert workflow.model_dump() == before

    def test_many_to_many_self_relation(self) -> None:
        resolved = _resolve(
            {
                "name": "Blog",
                "workflows": [
                    {
                        "name": "tag",
                        "relations": [
                            {"targetEntityName": "tag", "cardinality": "many-to-many"}
                        ],
                    }
                ],
            }
        )
        assert _field_names(resolved["tag"]) == ["tags", "relatedTags"]
