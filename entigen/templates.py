# File: entigen/templates.py
"""
Entigen - Artifact Template Engine
===================================
Transforms ``ResolvedEntity`` records and a ``GenerationConfig`` into the
text of every generated artifact:

    1. Prisma storage schema (one document for the whole workflow)
    2. TypeScript runtime types
    3. zod request validators (create + partial update)
    4. Prisma-backed services with paginated listing
    5. Express controllers
    6. Express routers
    7. Shared support files (Prisma client, ApiError, catchAsync, response)

**Performance contract:**
    - All string assembly uses ``List[str]`` + ``"\\n".join()``.
    - Template methods are stateless, so per-entity generation can run in
      any order.

Names and type mappings come exclusively from ``entigen.naming`` so the
storage schema, runtime type and validator of an entity never diverge.
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, List, Sequence, Tuple

from entigen.models import GenerationConfig, Property
from entigen.naming import (
    custom_validators,
    runtime_type,
    schema_name,
    storage_type,
    to_camel_case,
    type_name,
    update_schema_name,
    validator_expression,
)
from entigen.resolver import FieldKind, RelationField, ResolvedEntity
from entigen.utils import indent_lines, js_string

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("entigen.templates")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_ID_FIELD: Tuple[str, str, str] = ("id", "String", "@id @default(uuid())")
_TIMESTAMP_FIELDS: Tuple[Tuple[str, str, str], ...] = (
    ("createdAt", "DateTime", "@default(now())"),
    ("updatedAt", "DateTime", "@updatedAt"),
)

# Prisma error codes handled by generated services
_UNIQUE_VIOLATION: str = "P2002"
_FOREIGN_KEY_VIOLATION: str = "P2003"
_RECORD_NOT_FOUND: str = "P2025"

# Providers whose string filters accept ``mode: 'insensitive'``
_CASE_INSENSITIVE_PROVIDERS: FrozenSet[str] = frozenset({"postgresql", "cockroachdb"})

SCHEMA_PATH: str = "prisma/schema.prisma"
PRISMA_CLIENT_PATH: str = "src/lib/prisma.ts"
API_ERROR_PATH: str = "src/utils/ApiError.ts"
CATCH_ASYNC_PATH: str = "src/utils/catchAsync.ts"
RESPONSE_PATH: str = "src/utils/response.ts"


# ---------------------------------------------------------------------------
# Artifact paths
# ---------------------------------------------------------------------------


def entity_file_stem(entity: ResolvedEntity) -> str:
    """File stem shared by every per-entity artifact (``user``, ``orderItem``)."""
    return entity.variable_name


def entity_artifact_paths(entity: ResolvedEntity) -> Dict[str, str]:
    """Relative paths of every artifact generated for *entity*, keyed by kind."""
    stem: str = entity_file_stem(entity)
    paths: Dict[str, str] = {
        "type": f"src/types/{stem}.ts",
        "service": f"src/services/{stem}.service.ts",
        "controller": f"src/controllers/{stem}.controller.ts",
        "route": f"src/routes/{stem}.routes.ts",
    }
    if entity.has_validator:
        paths["validator"] = f"src/validators/{stem}.validator.ts"
    return paths


def _align_rows(rows: Sequence[Tuple[str, str, str]]) -> List[str]:
    """Column-align ``(name, type, attributes)`` rows of a Prisma model."""
    name_width: int = max(len(row[0]) for row in rows)
    type_width: int = max(len(row[1]) for row in rows)
    aligned: List[str] = []
    for name, field_type, attributes in rows:
        line: str = f"{name.ljust(name_width)} {field_type.ljust(type_width)}"
        if attributes:
            line += f" {attributes}"
        aligned.append(line.rstrip())
    return aligned


# ---------------------------------------------------------------------------
# TemplateGenerator class
# ---------------------------------------------------------------------------


class TemplateGenerator:
    """
    Stateless artifact generator.

    Each ``generate_*`` method returns the complete content of one file.
    The only input beyond the resolved entity is the per-request
    ``GenerationConfig``.
    """

    def __init__(self, config: GenerationConfig) -> None:
        self._config: GenerationConfig = config
        logger.debug(
            "TemplateGenerator initialised (provider=%s, page_size=%d/%d).",
            config.datasource_provider,
            config.default_page_size,
            config.max_page_size,
        )

    # ===================================================================
    # 1. Storage schema
    # ===================================================================

    def _relation_rows(self, relation_field: RelationField) -> List[Tuple[str, str, str]]:
        relation: str = js_string(relation_field.relation_name)
        target: str = relation_field.target_model

        if relation_field.kind == FieldKind.COLLECTION:
            return [(relation_field.name, f"{target}[]", f"@relation({relation})")]

        if relation_field.kind == FieldKind.REFERENCE:
            return [(relation_field.name, f"{target}?", f"@relation({relation})")]

        optional: str = "?" if relation_field.optional else ""
        column: str = relation_field.foreign_key or ""
        column_attributes: str = "@unique" if relation_field.unique else ""
        return [
            (
                relation_field.name,
                f"{target}{optional}",
                f"@relation({relation}, fields: [{column}], references: [id])",
            ),
            (column, f"String{optional}", column_attributes),
        ]

    def generate_model_block(self, entity: ResolvedEntity) -> str:
        """
        One Prisma ``model`` block: identity field, properties, relation
        fields, then the creation/update timestamps.
        """
        rows: List[Tuple[str, str, str]] = [_ID_FIELD]
        for prop in entity.properties:
            optional: str = "?" if prop.nullable else ""
            rows.append((prop.name, f"{storage_type(prop.type)}{optional}", ""))
        for relation_field in entity.relation_fields:
            rows.extend(self._relation_rows(relation_field))
        rows.extend(_TIMESTAMP_FIELDS)

        lines: List[str] = [f"model {entity.model_name} {{"]
        lines.extend(indent_lines(_align_rows(rows)))
        lines.append("}")
        return "\n".join(lines)

    def generate_storage_schema(self, entities: Sequence[ResolvedEntity]) -> str:
        """
        The whole-workflow schema.  Models are emitted in declaration order
        so the document is diff-stable.
        """
        lines: List[str] = [
            "generator client {",
            '  provider = "prisma-client-js"',
            "}",
            "",
            "datasource db {",
            f"  provider = {js_string(self._config.datasource_provider)}",
            f"  url      = env({js_string(self._config.database_url_env)})",
            "}",
        ]
        for entity in entities:
            lines.append("")
            lines.append(self.generate_model_block(entity))
        lines.append("")
        return "\n".join(lines)

    # ===================================================================
    # 2. Runtime type
    # ===================================================================

    def generate_runtime_type(self, entity: ResolvedEntity) -> str:
        """
        ``export type XType`` from the properties, plus a ``connect`` input
        for every relation side that carries a foreign key.
        """
        members: List[str] = []
        for prop in entity.properties:
            if prop.nullable:
                members.append(f"{prop.name}?: {runtime_type(prop.type)} | null;")
            else:
                members.append(f"{prop.name}: {runtime_type(prop.type)};")

        for relation_field in entity.foreign_key_fields:
            optional: str = "?" if relation_field.optional else ""
            members.append(f"{relation_field.name}{optional}: {{")
            members.append("  connect: {")
            members.append("    id: string;")
            members.append("  };")
            members.append("};")

        lines: List[str] = [f"export type {type_name(entity.name)} = {{"]
        lines.extend(indent_lines(members))
        lines.append("};")
        lines.append("")
        return "\n".join(lines)

    # ===================================================================
    # 3. Request validator
    # ===================================================================

    def _schema_member(self, prop: Property) -> str:
        member: str = f"{prop.name}: {validator_expression(prop)},"
        names: List[str] = [name for name in custom_validators(prop) if name.strip()]
        if names:
            member += f" // custom: {', '.join(names)}"
        return member

    def generate_validator(self, entity: ResolvedEntity) -> str:
        """
        zod schemas for create (``xSchema``) and partial update
        (``updateXSchema``).  Callers only emit this file when the entity
        has properties.
        """
        create_schema: str = schema_name(entity.name)
        lines: List[str] = [
            "import { z } from 'zod';",
            "",
            f"export const {create_schema} = z.object({{",
        ]
        lines.extend(indent_lines([self._schema_member(p) for p in entity.properties]))
        lines.append("});")
        lines.append("")
        lines.append(
            f"export const {update_schema_name(entity.name)} = {create_schema}.partial();"
        )
        lines.append("")
        return "\n".join(lines)

    # ===================================================================
    # 4. Service
    # ===================================================================

    def _include_object(self, entity: ResolvedEntity) -> str:
        if not entity.relation_fields:
            return "{}"
        parts: str = ", ".join(f"{f.name}: true" for f in entity.relation_fields)
        return f"{{ {parts} }}"

    def _filterable_fields(self, entity: ResolvedEntity) -> List[str]:
        fields: List[str] = [p.name for p in entity.properties]
        fields.extend(f.foreign_key for f in entity.foreign_key_fields if f.foreign_key)
        return fields

    def generate_service(self, entity: ResolvedEntity) -> str:
        """
        ``XService`` with paginated ``getAll`` and ``getById``, ``create``,
        ``update`` and ``delete``.  Page sizes come from the config.
        """
        cap: str = entity.model_name
        var: str = entity.variable_name
        label: str = entity.name.lower()
        default_take: int = self._config.default_page_size
        max_take: int = self._config.max_page_size
        searchable: List[str] = [
            p.name for p in entity.properties if p.type.lower() == "string"
        ]
        filterable: str = ", ".join(f"'{name}'" for name in self._filterable_fields(entity))

        lines: List[str] = [
            f"import {{ {type_name(entity.name)} }} from '../types/{entity_file_stem(entity)}';",
            "import prisma from '../lib/prisma';",
            "import { ApiError } from '../utils/ApiError';",
            "",
            f"const include = {self._include_object(entity)};",
            f"const filterableFields: string[] = [{filterable}];",
            "const sortableFields: string[] = [...filterableFields, 'createdAt', 'updatedAt'];",
            "",
            f"export const {cap}Service = {{",
            "  async getAll(query: any) {",
            "    const {",
            "      skip = '0',",
            f"      take = '{default_take}',",
            "      sortBy = 'createdAt',",
            "      order = 'desc',",
            "      search,",
            "      ...filters",
            "    } = query;",
            "",
            "    const skipNum = Math.max(parseInt(skip) || 0, 0);",
            f"    const takeNum = Math.max(Math.min(parseInt(take) || {default_take}, {max_take}), 1);",
            "    const orderValue = order === 'asc' ? 'asc' : 'desc';",
            "    if (typeof sortBy !== 'string' || !sortableFields.includes(sortBy)) {",
            "      throw new ApiError(400, `Cannot sort by '${sortBy}'`);",
            "    }",
            "",
            "    const where: any = {};",
        ]

        if searchable:
            contains: str = "contains: search"
            if self._config.datasource_provider in _CASE_INSENSITIVE_PROVIDERS:
                contains += ", mode: 'insensitive'"
            conditions: str = ", ".join(
                f"{{ {name}: {{ {contains} }} }}" for name in searchable
            )
            lines.extend([
                "    if (search) {",
                f"      where.OR = [{conditions}];",
                "    }",
            ])

        lines.extend([
            "",
            "    Object.keys(filters).forEach((key) => {",
            "      if (",
            "        filterableFields.includes(key) &&",
            "        typeof filters[key] === 'string' &&",
            "        filters[key].trim() !== ''",
            "      ) {",
            "        where[key] = filters[key];",
            "      }",
            "    });",
            "",
            "    try {",
            "      const [data, total] = await Promise.all([",
            f"        prisma.{var}.findMany({{",
            "          where,",
            "          skip: skipNum,",
            "          take: takeNum,",
            "          orderBy: { [sortBy]: orderValue },",
            "        }),",
            f"        prisma.{var}.count({{ where }}),",
            "      ]);",
            "",
            "      return {",
            "        data,",
            "        meta: {",
            "          total,",
            "          skip: skipNum,",
            "          take: takeNum,",
            "          page: Math.floor(skipNum / takeNum) + 1,",
            "          totalPages: Math.ceil(total / takeNum),",
            "        },",
            "      };",
            "    } catch (error) {",
            f"      throw new ApiError(500, 'Failed to retrieve {label} records');",
            "    }",
            "  },",
            "",
            "  async getById(id: string) {",
            "    try {",
            f"      return await prisma.{var}.findUnique({{ where: {{ id }}, include }});",
            "    } catch (error) {",
            f"      throw new ApiError(500, 'Failed to retrieve {label}');",
            "    }",
            "  },",
            "",
            "  async create(data: any) {",
            "    try {",
            f"      return await prisma.{var}.create({{ data, include }});",
            "    } catch (error: any) {",
            f"      if (error.code === '{_UNIQUE_VIOLATION}') {{",
            "        throw new ApiError(409, 'A record with this information already exists');",
            "      }",
            f"      if (error.code === '{_FOREIGN_KEY_VIOLATION}') {{",
            "        throw new ApiError(400, 'Referenced record does not exist');",
            "      }",
            f"      throw new ApiError(500, 'Failed to create {label}');",
            "    }",
            "  },",
            "",
            f"  async update(id: string, data: Partial<{type_name(entity.name)}>) {{",
            "    try {",
            f"      const existing = await prisma.{var}.findUnique({{ where: {{ id }} }});",
            "      if (!existing) return null;",
            "",
            f"      return await prisma.{var}.update({{ where: {{ id }}, data: data as any, include }});",
            "    } catch (error: any) {",
            f"      if (error.code === '{_UNIQUE_VIOLATION}') {{",
            "        throw new ApiError(409, 'A record with this information already exists');",
            "      }",
            f"      if (error.code === '{_FOREIGN_KEY_VIOLATION}') {{",
            "        throw new ApiError(400, 'Referenced record does not exist');",
            "      }",
            f"      if (error.code === '{_RECORD_NOT_FOUND}') {{",
            "        return null;",
            "      }",
            f"      throw new ApiError(500, 'Failed to update {label}');",
            "    }",
            "  },",
            "",
            "  async delete(id: string) {",
            "    try {",
            f"      const existing = await prisma.{var}.findUnique({{ where: {{ id }} }});",
            "      if (!existing) return false;",
            "",
            f"      await prisma.{var}.delete({{ where: {{ id }} }});",
            "      return true;",
            "    } catch (error: any) {",
            f"      if (error.code === '{_FOREIGN_KEY_VIOLATION}') {{",
            "        throw new ApiError(400, 'Cannot delete record with existing references');",
            "      }",
            f"      if (error.code === '{_RECORD_NOT_FOUND}') {{",
            "        return false;",
            "      }",
            f"      throw new ApiError(500, 'Failed to delete {label}');",
            "    }",
            "  },",
            "};",
            "",
        ])
        return "\n".join(lines)

    # ===================================================================
    # 5. Controller
    # ===================================================================

    def _relation_inputs(self, entity: ResolvedEntity) -> List[str]:
        """
        ``connect`` inputs for every foreign-key side, read from the request
        body.  The referenced record must exist.
        """
        lines: List[str] = []
        for relation_field in entity.foreign_key_fields:
            name: str = relation_field.name
            handle: str = name[:1].upper() + name[1:]
            accessor: str = to_camel_case(relation_field.target)
            lines.extend([
                "",
                f"  const {name}Ref = req.body?.{name}?.connect?.id;",
                f"  if ({name}Ref) {{",
                f"    const existing{handle} = await prisma.{accessor}.findUnique({{",
                f"      where: {{ id: {name}Ref }},",
                "    });",
                f"    if (!existing{handle}) {{",
                f"      throw new ApiError(404, '{relation_field.target_model} not found');",
                "    }",
                f"    data.{name} = {{ connect: {{ id: {name}Ref }} }};",
                "  }",
            ])
        return lines

    @staticmethod
    def _parsed_body(schema: str, validated: bool) -> List[str]:
        """Validate the body when a schema exists; ``data`` holds the result."""
        if not validated:
            return ["  const data: Record<string, any> = {};"]
        return [
            f"  const parsed = {schema}.safeParse(req.body);",
            "  if (!parsed.success) {",
            "    throw new ApiError(400, 'Validation failed', parsed.error.errors);",
            "  }",
            "  const data: Record<string, any> = { ...parsed.data };",
        ]

    def generate_controller(self, entity: ResolvedEntity) -> str:
        """
        Express handlers ``getAllX``, ``getXById``, ``createX``, ``updateX``
        and ``deleteX``.  Create and update validate the body when the
        entity has a validator.
        """
        cap: str = entity.model_name
        stem: str = entity_file_stem(entity)
        service: str = f"{cap}Service"
        validated: bool = entity.has_validator
        relation_inputs: List[str] = self._relation_inputs(entity)

        lines: List[str] = ["import { Request, Response } from 'express';"]
        lines.append(f"import {{ {service} }} from '../services/{stem}.service';")
        if validated:
            lines.append(
                f"import {{ {schema_name(entity.name)}, {update_schema_name(entity.name)} }} "
                f"from '../validators/{stem}.validator';"
            )
        if relation_inputs:
            lines.append("import prisma from '../lib/prisma';")
        lines.extend([
            "import { ApiError } from '../utils/ApiError';",
            "import { catchAsync } from '../utils/catchAsync';",
            "import { sendResponse } from '../utils/response';",
            "",
            f"export const getAll{cap} = catchAsync(async (req: Request, res: Response): Promise<void> => {{",
            f"  const result = await {service}.getAll(req.query);",
            "  sendResponse(res, {",
            "    statusCode: 200,",
            "    success: true,",
            f"    message: '{cap} retrieved successfully',",
            "    data: result.data,",
            "    meta: result.meta,",
            "  });",
            "});",
            "",
            f"export const get{cap}ById = catchAsync(async (req: Request, res: Response): Promise<void> => {{",
            f"  const result = await {service}.getById(req.params.id);",
            "  if (!result) {",
            f"    throw new ApiError(404, '{cap} not found');",
            "  }",
            "  sendResponse(res, {",
            "    statusCode: 200,",
            "    success: true,",
            f"    message: '{cap} retrieved successfully',",
            "    data: result,",
            "  });",
            "});",
            "",
            f"export const create{cap} = catchAsync(async (req: Request, res: Response): Promise<void> => {{",
        ])
        lines.extend(self._parsed_body(schema_name(entity.name), validated))
        lines.extend(relation_inputs)
        lines.extend([
            "",
            f"  const result = await {service}.create(data);",
            "  sendResponse(res, {",
            "    statusCode: 201,",
            "    success: true,",
            f"    message: '{cap} created successfully',",
            "    data: result,",
            "  });",
            "});",
            "",
            f"export const update{cap} = catchAsync(async (req: Request, res: Response): Promise<void> => {{",
        ])
        lines.extend(self._parsed_body(update_schema_name(entity.name), validated))
        lines.extend(relation_inputs)
        lines.extend([
            "",
            f"  const result = await {service}.update(req.params.id, data);",
            "  if (!result) {",
            f"    throw new ApiError(404, '{cap} not found');",
            "  }",
            "  sendResponse(res, {",
            "    statusCode: 200,",
            "    success: true,",
            f"    message: '{cap} updated successfully',",
            "    data: result,",
            "  });",
            "});",
            "",
            f"export const delete{cap} = catchAsync(async (req: Request, res: Response): Promise<void> => {{",
            f"  const result = await {service}.delete(req.params.id);",
            "  if (!result) {",
            f"    throw new ApiError(404, '{cap} not found');",
            "  }",
            "  sendResponse(res, {",
            "    statusCode: 200,",
            "    success: true,",
            f"    message: '{cap} deleted successfully',",
            "  });",
            "});",
            "",
        ])
        return "\n".join(lines)

    # ===================================================================
    # 6. Router
    # ===================================================================

    def generate_route(self, entity: ResolvedEntity) -> str:
        cap: str = entity.model_name
        handlers: List[str] = [
            f"getAll{cap}",
            f"get{cap}ById",
            f"create{cap}",
            f"update{cap}",
            f"delete{cap}",
        ]
        lines: List[str] = [
            "import { Router } from 'express';",
            "import {",
        ]
        lines.extend(indent_lines([f"{handler}," for handler in handlers]))
        lines.extend([
            f"}} from '../controllers/{entity_file_stem(entity)}.controller';",
            "",
            "const router = Router();",
            "",
            f"router.get('/', getAll{cap});",
            f"router.get('/:id', get{cap}ById);",
            f"router.post('/', create{cap});",
            f"router.put('/:id', update{cap});",
            f"router.delete('/:id', delete{cap});",
            "",
            "export default router;",
            "",
        ])
        return "\n".join(lines)

    # ===================================================================
    # 7. Shared support files
    # ===================================================================

    def generate_prisma_client(self) -> str:
        return "\n".join([
            "import { PrismaClient } from '@prisma/client';",
            "",
            "const prisma = new PrismaClient();",
            "",
            "export default prisma;",
            "",
        ])

    def generate_api_error(self) -> str:
        return "\n".join([
            "export class ApiError extends Error {",
            "  statusCode: number;",
            "  isOperational: boolean;",
            "  details?: any;",
            "",
            "  constructor(statusCode: number, message: string, details?: any, isOperational = true) {",
            "    super(message);",
            "    this.statusCode = statusCode;",
            "    this.isOperational = isOperational;",
            "    this.details = details;",
            "    Error.captureStackTrace(this, this.constructor);",
            "  }",
            "}",
            "",
        ])

    def generate_catch_async(self) -> str:
        return "\n".join([
            "import { Request, Response, NextFunction } from 'express';",
            "",
            "type AsyncHandler = (req: Request, res: Response, next: NextFunction) => Promise<any>;",
            "",
            "export const catchAsync = (fn: AsyncHandler) => {",
            "  return (req: Request, res: Response, next: NextFunction) => {",
            "    Promise.resolve(fn(req, res, next)).catch(next);",
            "  };",
            "};",
            "",
        ])

    def generate_response_helper(self) -> str:
        return "\n".join([
            "import { Response } from 'express';",
            "",
            "interface ApiResponse<T = any> {",
            "  statusCode: number;",
            "  success: boolean;",
            "  message: string;",
            "  data?: T;",
            "  meta?: {",
            "    total?: number;",
            "    skip?: number;",
            "    take?: number;",
            "    page?: number;",
            "    totalPages?: number;",
            "  };",
            "  errors?: any;",
            "}",
            "",
            "export const sendResponse = <T>(res: Response, payload: ApiResponse<T>): void => {",
            "  const body: ApiResponse<T> = {",
            "    statusCode: payload.statusCode,",
            "    success: payload.success,",
            "    message: payload.message,",
            "  };",
            "  if (payload.data !== undefined) body.data = payload.data;",
            "  if (payload.meta) body.meta = payload.meta;",
            "  if (payload.errors) body.errors = payload.errors;",
            "",
            "  res.status(payload.statusCode).json(body);",
            "};",
            "",
        ])

    def generate_support_files(self) -> Dict[str, str]:
        """Shared files imported by every service and controller."""
        return {
            PRISMA_CLIENT_PATH: self.generate_prisma_client(),
            API_ERROR_PATH: self.generate_api_error(),
            CATCH_ASYNC_PATH: self.generate_catch_async(),
            RESPONSE_PATH: self.generate_response_helper(),
        }

    # ===================================================================
    # 8. Aggregate generation
    # ===================================================================

    def generate_all_for_entity(self, entity: ResolvedEntity) -> Dict[str, str]:
        """
        Generate every per-entity file.

        Returns a dict of relative_path → file_content.
        """
        paths: Dict[str, str] = entity_artifact_paths(entity)
        result: Dict[str, str] = {
            paths["type"]: self.generate_runtime_type(entity),
            paths["service"]: self.generate_service(entity),
            paths["controller"]: self.generate_controller(entity),
            paths["route"]: self.generate_route(entity),
        }
        if "validator" in paths:
            result[paths["validator"]] = self.generate_validator(entity)

        logger.debug(
            "Generated all files for entity '%s': %d files.",
            entity.name,
            len(result),
        )
        return result

    def generate_all(self, entities: Sequence[ResolvedEntity]) -> Dict[str, str]:
        """
        Generate the complete artifact set for a resolved workflow.

        Returns a dict of relative_path → file_content.

        Complexity: O(E × (P + R)), linear in the size of the workflow.
        """
        result: Dict[str, str] = {SCHEMA_PATH: self.generate_storage_schema(entities)}
        result.update(self.generate_support_files())
        for entity in entities:
            result.update(self.generate_all_for_entity(entity))

        total_lines: int = sum(content.count("\n") + 1 for content in result.values())
        logger.info(
            "Full generation complete: %d files, ~%d lines.",
            len(result),
            total_lines,
        )
        return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "TemplateGenerator",
    "entity_artifact_paths",
    "entity_file_stem",
    "SCHEMA_PATH",
    "PRISMA_CLIENT_PATH",
    "API_ERROR_PATH",
    "CATCH_ASYNC_PATH",
    "RESPONSE_PATH",
]

logger.debug("entigen.templates loaded: %d public symbols.", len(__all__))
