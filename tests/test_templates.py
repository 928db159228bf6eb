"""
tests/test_templates.py
Unit tests for entigen.templates: the text of every generated artifact.

The assertions look for the lines that matter rather than comparing whole
files, so cosmetic template changes do not break the suite.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List

import pytest

from entigen.models import GenerationConfig, Workflow
from entigen.resolver import ResolvedEntity, resolve_relations, resolved_by_name
from entigen.templates import (
    API_ERROR_PATH,
    PRISMA_CLIENT_PATH,
    SCHEMA_PATH,
    TemplateGenerator,
    entity_artifact_paths,
)


def _resolve(raw: Dict[str, Any]) -> List[ResolvedEntity]:
    workflow = Workflow.model_validate({k: v for k, v in raw.items() if k != "config"})
    return resolve_relations(workflow)


@pytest.fixture()
def shop_entities(shop_dict: Dict[str, Any]) -> Dict[str, ResolvedEntity]:
    return resolved_by_name(_resolve(shop_dict))


@pytest.fixture()
def reference_entities(workflow_dict: Dict[str, Any]) -> List[ResolvedEntity]:
    return _resolve(workflow_dict)


@pytest.fixture()
def generator() -> TemplateGenerator:
    return TemplateGenerator(GenerationConfig(default_page_size=25, max_page_size=50))


# ===========================================================================
# Storage schema
# ===========================================================================


class TestStorageSchema:
    """The Prisma schema document."""

    def test_header_blocks(
        self, generator: TemplateGenerator, shop_dict: Dict[str, Any]
    ) -> None:
        schema = generator.generate_storage_schema(_resolve(shop_dict))
        assert schema.startswith("generator client {")
        assert 'provider = "prisma-client-js"' in schema
        assert 'provider = "postgresql"' in schema
        assert 'env("DATABASE_URL")' in schema

    def test_provider_from_config(self, shop_dict: Dict[str, Any]) -> None:
        schema = TemplateGenerator(
            GenerationConfig(datasource_provider="sqlite")
        ).generate_storage_schema(_resolve(shop_dict))
        assert 'provider = "sqlite"' in schema

    def test_models_in_declaration_order(
        self, generator: TemplateGenerator, shop_dict: Dict[str, Any]
    ) -> None:
        schema = generator.generate_storage_schema(_resolve(shop_dict))
        assert schema.index("model User {") < schema.index("model Order {")

    def test_one_to_many_fields(
        self, generator: TemplateGenerator, shop_entities: Dict[str, ResolvedEntity]
    ) -> None:
        order = generator.generate_model_block(shop_entities["order"])
        assert re.search(
            r'^\s*user\s+User\s+@relation\("OrderToUser", fields: \[userId\], references: \[id\]\)$',
            order,
            re.M,
        )
        assert re.search(r"^\s*userId\s+String$", order, re.M)

        user = generator.generate_model_block(shop_entities["user"])
        assert re.search(r'^\s*orders\s+Order\[\]\s+@relation\("OrderToUser"\)$', user, re.M)
        assert re.search(r"^\s*age\s+Int$", user, re.M)

    def test_generated_members(
        self, generator: TemplateGenerator, shop_entities: Dict[str, ResolvedEntity]
    ) -> None:
        block = generator.generate_model_block(shop_entities["user"])
        lines = [line.split()[0] for line in block.splitlines()[1:-1]]
        assert lines[0] == "id"
        assert lines[-2:] == ["createdAt", "updatedAt"]
        assert "@id @default(uuid())" in block
        assert "@updatedAt" in block

    def test_one_to_one_column_is_unique(
        self, generator: TemplateGenerator, reference_entities: List[ResolvedEntity]
    ) -> None:
        profile = resolved_by_name(reference_entities)["profile"]
        block = generator.generate_model_block(profile)
        assert re.search(r"^\s*userId\s+String\s+@unique$", block, re.M)
        assert re.search(r"^\s*bio\s+String\?$", block, re.M)

    def test_self_relation_is_optional(
        self, generator: TemplateGenerator, reference_entities: List[ResolvedEntity]
    ) -> None:
        category = resolved_by_name(reference_entities)["category"]
        block = generator.generate_model_block(category)
        assert re.search(r"^\s*parentCategory\s+Category\?\s+@relation", block, re.M)
        assert re.search(r"^\s*parentCategoryId\s+String\?$", block, re.M)
        assert re.search(r"^\s*categories\s+Category\[\]", block, re.M)


# ===========================================================================
# Runtime types and validators
# ===========================================================================


class TestRuntimeTypeAndValidator:
    """Types and zod schemas derived from the same properties."""

    def test_runtime_type(
        self, generator: TemplateGenerator, shop_entities: Dict[str, ResolvedEntity]
    ) -> None:
        user_type = generator.generate_runtime_type(shop_entities["user"])
        assert "export type UserType = {" in user_type
        assert "  age: number;" in user_type

        order_type = generator.generate_runtime_type(shop_entities["order"])
        assert "  user: {" in order_type
        assert "id: string;" in order_type

    def test_nullable_runtime_member(
        self, generator: TemplateGenerator, reference_entities: List[ResolvedEntity]
    ) -> None:
        user = resolved_by_name(reference_entities)["user"]
        assert "  age?: number | null;" in generator.generate_runtime_type(user)

    def test_validator(
        self, generator: TemplateGenerator, shop_entities: Dict[str, ResolvedEntity]
    ) -> None:
        validator = generator.generate_validator(shop_entities["user"])
        assert "import { z } from 'zod';" in validator
        assert "export const userSchema = z.object({" in validator
        assert "  age: z.number()," in validator
        assert "export const updateUserSchema = userSchema.partial();" in validator

    def test_validator_rules_and_custom_comment(
        self, generator: TemplateGenerator, reference_entities: List[ResolvedEntity]
    ) -> None:
        by_name = resolved_by_name(reference_entities)
        user = generator.generate_validator(by_name["user"])
        assert "age: z.number().min(0).max(150).nullable()," in user
        assert 'role: z.enum(["customer", "staff", "admin"]),' in user

        order = generator.generate_validator(by_name["order"])
        assert "// custom: isUniqueReference" in order
        assert ".regex(/^ORD-[0-9]{6}$/)" in order

    def test_every_property_in_type_and_validator(
        self, generator: TemplateGenerator, reference_entities: List[ResolvedEntity]
    ) -> None:
        for entity in reference_entities:
            runtime = generator.generate_runtime_type(entity)
            validator = generator.generate_validator(entity)
            for prop in entity.properties:
                assert f"{prop.name}" in runtime
                assert f"  {prop.name}: z." in validator

    def test_no_validator_without_properties(
        self, shop_entities: Dict[str, ResolvedEntity]
    ) -> None:
        assert "validator" not in entity_artifact_paths(shop_entities["order"])
        assert entity_artifact_paths(shop_entities["user"])["validator"] == (
            "src/validators/user.validator.ts"
        )


# ===========================================================================
# Service, controller, routes
# ===========================================================================


class TestHttpLayer:
    """Services, controllers and routers."""

    def test_service_page_sizes(
        self, generator: TemplateGenerator, shop_entities: Dict[str, ResolvedEntity]
    ) -> None:
        service = generator.generate_service(shop_entities["user"])
        assert "export const UserService = {" in service
        assert "take = '25'" in service
        assert "parseInt(take) || 25, 50)" in service
        assert "include = { orders: true }" in service

    def test_service_error_codes(
        self, generator: TemplateGenerator, shop_entities: Dict[str, ResolvedEntity]
    ) -> None:
        service = generator.generate_service(shop_entities["order"])
        for code in ("P2002", "P2003", "P2025"):
            assert code in service
        assert "'userId'" in service

    def test_search_only_on_string_properties(
        self, generator: TemplateGenerator, shop_entities: Dict[str, ResolvedEntity]
    ) -> None:
        assert "where.OR" not in generator.generate_service(shop_entities["user"])

    def test_controller_checks_references(
        self, generator: TemplateGenerator, shop_entities: Dict[str, ResolvedEntity]
    ) -> None:
        controller = generator.generate_controller(shop_entities["order"])
        assert "import prisma from '../lib/prisma';" in controller
        assert "prisma.user.findUnique" in controller
        assert "'User not found'" in controller
        assert "validator" not in controller

    def test_controller_validates_body(
        self, generator: TemplateGenerator, shop_entities: Dict[str, ResolvedEntity]
    ) -> None:
        controller = generator.generate_controller(shop_entities["user"])
        assert "userSchema.safeParse(req.body)" in controller
        assert "updateUserSchema.safeParse(req.body)" in controller
        assert "import prisma" not in controller

    def test_controller_passes_parsed_data(
        self, generator: TemplateGenerator, shop_entities: Dict[str, ResolvedEntity]
    ) -> None:
        controller = generator.generate_controller(shop_entities["user"])
        assert controller.count("const data: Record<string, any> = { ...parsed.data };") == 2
        assert "UserService.create(data)" in controller
        assert "UserService.update(req.params.id, data)" in controller
        assert "update(req.params.id, req.body)" not in controller

    def test_controller_connects_references(
        self, generator: TemplateGenerator, shop_entities: Dict[str, ResolvedEntity]
    ) -> None:
        controller = generator.generate_controller(shop_entities["order"])
        assert controller.count("const userRef = req.body?.user?.connect?.id;") == 2
        assert controller.count("data.user = { connect: { id: userRef } };") == 2
        assert "const data: Record<string, any> = {};" in controller

    def test_service_rejects_unknown_sort_field(
        self, generator: TemplateGenerator, shop_entities: Dict[str, ResolvedEntity]
    ) -> None:
        service = generator.generate_service(shop_entities["order"])
        assert "const filterableFields: string[] = ['userId'];" in service
        assert (
            "const sortableFields: string[] = [...filterableFields, 'createdAt', 'updatedAt'];"
            in service
        )
        assert "!sortableFields.includes(sortBy)" in service
        assert "throw new ApiError(400, `Cannot sort by '${sortBy}'`);" in service

    @pytest.mark.parametrize(
        "provider, insensitive",
        [
            ("postgresql", True),
            ("cockroachdb", True),
            ("mysql", False),
            ("sqlite", False),
            ("sqlserver", False),
        ],
    )
    def test_search_mode_follows_provider(self, provider: str, insensitive: bool) -> None:
        entity = _resolve(
            {"name": "Shop", "workflows": [{"name": "user", "props": [{"name": "email", "type": "string"}]}]}
        )[0]
        service = TemplateGenerator(
            GenerationConfig(datasource_provider=provider)
        ).generate_service(entity)

        assert "where.OR = [{ email: { contains: search" in service
        assert ("mode: 'insensitive'" in service) is insensitive

    def test_routes(
        self, generator: TemplateGenerator, shop_entities: Dict[str, ResolvedEntity]
    ) -> None:
        routes = generator.generate_route(shop_entities["order"])
        for line in (
            "router.get('/', getAllOrder);",
            "router.get('/:id', getOrderById);",
            "router.post('/', createOrder);",
            "router.put('/:id', updateOrder);",
            "router.delete('/:id', deleteOrder);",
            "export default router;",
        ):
            assert line in routes


# ===========================================================================
# Aggregate generation
# ===========================================================================


class TestGenerateAll:
    """The complete file set."""

    def test_file_set(
        self, generator: TemplateGenerator, shop_dict: Dict[str, Any]
    ) -> None:
        files = generator.generate_all(_resolve(shop_dict))
        assert SCHEMA_PATH in files
        assert PRISMA_CLIENT_PATH in files
        assert API_ERROR_PATH in files
        assert "src/types/order.ts" in files
        assert "src/routes/user.routes.ts" in files
        assert "src/validators/user.validator.ts" in files
        assert "src/validators/order.validator.ts" not in files

    def test_deterministic(
        self, generator: TemplateGenerator, workflow_dict: Dict[str, Any]
    ) -> None:
        assert generator.generate_all(_resolve(workflow_dict)) == generator.generate_all(
            _resolve(workflow_dict)
        )
