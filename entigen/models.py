# File: entigen/models.py
"""
Entigen - Workflow Data Model
==============================
Pydantic V2 models describing the compiler input: a ``Workflow`` (one
project) made of ``Entity`` definitions, each with typed ``Property``
entries, ordered ``ValidationRule`` lists and ``Relation`` declarations.

The models only check *shape* (JSON types, known keys, known tags).  Every
semantic rule (identifier legality, duplicates, dangling references,
rule/type compatibility, ownership cycles) lives in ``entigen.validators``
so that it can be reported as a batch instead of failing on the first
problem.

All input models are frozen: a compilation never mutates its input.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Annotated, Dict, FrozenSet, List, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    model_validator,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("entigen.models")

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class FieldType(str, Enum):
    """Known property type tags.  Any other non-empty tag is a custom type."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    BIGINT = "bigint"
    SYMBOL = "symbol"
    UNDEFINED = "undefined"
    NULL = "null"
    OBJECT = "object"
    ARRAY = "array"
    FUNCTION = "function"
    DATE = "date"
    ANY = "any"
    UNKNOWN = "unknown"
    VOID = "void"
    NEVER = "never"
    JSON = "json"
    FLOAT = "float"
    INT = "int"
    DATETIME = "datetime"
    BYTES = "bytes"
    DECIMAL = "decimal"


KNOWN_FIELD_TYPES: FrozenSet[str] = frozenset(t.value for t in FieldType)


class Cardinality(str, Enum):
    """Relation multiplicity."""

    ONE_TO_ONE = "one-to-one"
    ONE_TO_MANY = "one-to-many"
    MANY_TO_MANY = "many-to-many"


# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    use_enum_values=True,
    frozen=True,
    extra="forbid",
)

# Feature blocks carry free-form settings for their collaborators
_FEATURE_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    frozen=True,
    extra="allow",
)


# ---------------------------------------------------------------------------
# Validation rules (closed tagged union, discriminated on ``type``)
# ---------------------------------------------------------------------------


class MinLengthRule(BaseModel):
    model_config = _SHARED_CONFIG

    type: Literal["minLength"] = "minLength"
    value: int


class MaxLengthRule(BaseModel):
    model_config = _SHARED_CONFIG

    type: Literal["maxLength"] = "maxLength"
    value: int


class MinRule(BaseModel):
    """Lower numeric bound; also used for date-like properties."""

    model_config = _SHARED_CONFIG

    type: Literal["min"] = "min"
    value: Union[int, float]


class MaxRule(BaseModel):
    """Upper numeric bound; also used for date-like properties."""

    model_config = _SHARED_CONFIG

    type: Literal["max"] = "max"
    value: Union[int, float]


class PatternRule(BaseModel):
    model_config = _SHARED_CONFIG

    type: Literal["pattern"] = "pattern"
    value: str


class EmailRule(BaseModel):
    model_config = _SHARED_CONFIG

    type: Literal["email"] = "email"


class UrlRule(BaseModel):
    model_config = _SHARED_CONFIG

    type: Literal["url"] = "url"


class UuidRule(BaseModel):
    model_config = _SHARED_CONFIG

    type: Literal["uuid"] = "uuid"


class EnumRule(BaseModel):
    """
    Enumerated allowed values.

    An empty ``values`` list is accepted here and rejected by the
    validator, so it shows up in the batched error report.
    """

    model_config = _SHARED_CONFIG

    type: Literal["enum"] = "enum"
    values: List[str] = Field(default_factory=list)


class StartsWithRule(BaseModel):
    model_config = _SHARED_CONFIG

    type: Literal["startsWith"] = "startsWith"
    value: str


class EndsWithRule(BaseModel):
    model_config = _SHARED_CONFIG

    type: Literal["endsWith"] = "endsWith"
    value: str


class CustomRule(BaseModel):
    """
    Opaque escape hatch.  The compiler records ``validator`` (a function
    name in the generated project) and attaches no semantics to it.
    """

    model_config = _SHARED_CONFIG

    type: Literal["custom"] = "custom"
    validator: str


ValidationRule = Annotated[
    Union[
        MinLengthRule,
        MaxLengthRule,
        MinRule,
        MaxRule,
        PatternRule,
        EmailRule,
        UrlRule,
        UuidRule,
        EnumRule,
        StartsWithRule,
        EndsWithRule,
        CustomRule,
    ],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Entity building blocks
# ---------------------------------------------------------------------------


class Property(BaseModel):
    """A single scalar field of an entity."""

    model_config = _SHARED_CONFIG

    name: str = Field(..., description="Field name, used verbatim in every artifact.")
    type: str = Field(..., min_length=1, description="Known FieldType tag or a custom tag.")
    nullable: bool = Field(default=False, description="Whether the value may be null.")
    validation: List[ValidationRule] = Field(
        default_factory=list, description="Ordered validation rules."
    )

    @computed_field  # type: ignore[misc]
    @property
    def is_custom_type(self) -> bool:
        return self.type.lower() not in KNOWN_FIELD_TYPES

    def __repr__(self) -> str:
        null_flag: str = "?" if self.nullable else ""
        return f"<Property {self.name}: {self.type}{null_flag}>"


class Relation(BaseModel):
    """
    A relation declared on one entity towards ``target``.

    ``is_parent`` marks the declaring side as the owner of a one-to-one or
    one-to-many relation; the owner never carries the foreign key.
    """

    model_config = _SHARED_CONFIG

    target: str = Field(
        ...,
        validation_alias=AliasChoices("targetEntityName", "target", "controller"),
        serialization_alias="targetEntityName",
    )
    cardinality: Cardinality = Field(
        ...,
        validation_alias=AliasChoices("cardinality", "relation"),
    )
    is_parent: bool = Field(
        default=False,
        validation_alias=AliasChoices("isParent", "is_parent"),
        serialization_alias="isParent",
    )

    @property
    def is_ownership_edge(self) -> bool:
        """True for a one-to-one/one-to-many relation declared by its owner."""
        return self.is_parent and self.cardinality != Cardinality.MANY_TO_MANY

    def __repr__(self) -> str:
        parent_flag: str = " (parent)" if self.is_parent else ""
        return f"<Relation {self.cardinality} → {self.target}{parent_flag}>"


class Entity(BaseModel):
    """One resource type.  Layout keys coming from the editor are ignored."""

    model_config = _SHARED_CONFIG

    name: str = Field(..., description="Entity name, unique case-insensitively.")
    properties: List[Property] = Field(
        default_factory=list,
        validation_alias=AliasChoices("props", "properties"),
    )
    relations: List[Relation] = Field(default_factory=list)

    # UI-only metadata, never read by the compiler
    id: Optional[str] = Field(default=None, exclude=True)
    card_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("cardId", "card_id"), exclude=True
    )
    position: Optional[Dict[str, float]] = Field(default=None, exclude=True)
    dimensions: Optional[Dict[str, float]] = Field(default=None, exclude=True)

    @computed_field  # type: ignore[misc]
    @property
    def property_names(self) -> List[str]:
        return [p.name for p in self.properties]

    def __repr__(self) -> str:
        return (
            f"<Entity {self.name} props={len(self.properties)} "
            f"relations={len(self.relations)}>"
        )


# ---------------------------------------------------------------------------
# Pass-through project options
# ---------------------------------------------------------------------------

HttpMethod = Literal[
    "GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD", "CONNECT", "TRACE"
]


class CorsOptions(BaseModel):
    """CORS policy handed to the HTTP wiring collaborator untouched."""

    model_config = _SHARED_CONFIG

    origin: Optional[Union[bool, str, List[str]]] = None
    methods: Optional[Union[HttpMethod, List[HttpMethod]]] = None
    allowed_headers: Optional[Union[str, List[str]]] = Field(
        default=None, alias="allowedHeaders"
    )
    exposed_headers: Optional[Union[str, List[str]]] = Field(
        default=None, alias="exposedHeaders"
    )
    credentials: Optional[bool] = None
    max_age: Optional[int] = Field(default=None, alias="maxAge")
    preflight_continue: Optional[bool] = Field(default=None, alias="preflightContinue")
    options_success_status: Optional[int] = Field(
        default=None, alias="optionsSuccessStatus"
    )


class DataSeeding(BaseModel):
    model_config = _FEATURE_CONFIG

    enabled: bool = False
    record_count: int = Field(default=10, ge=1, le=1000, alias="recordCount")
    locale: str = Field(default="en", min_length=1)
    custom_seed: bool = Field(default=False, alias="customSeed")


class ApiDocumentation(BaseModel):
    model_config = _FEATURE_CONFIG

    enabled: bool = False
    title: str = ""
    description: str = ""
    version: str = Field(default="1.0.0", min_length=1)
    include_swagger_ui: bool = Field(default=True, alias="includeSwaggerUI")


class EmailTemplates(BaseModel):
    model_config = _FEATURE_CONFIG

    verification: bool = True
    password_reset: bool = Field(default=True, alias="passwordReset")
    welcome: bool = False


class EmailAuth(BaseModel):
    model_config = _FEATURE_CONFIG

    enabled: bool = False
    provider: Literal["nodemailer", "sendgrid", "aws-ses"] = "nodemailer"
    templates: EmailTemplates = Field(default_factory=EmailTemplates)


class OAuthProviders(BaseModel):
    model_config = _FEATURE_CONFIG

    enabled: bool = False
    providers: List[Literal["google", "github", "facebook", "twitter"]] = Field(
        default_factory=list
    )
    callback_urls: Dict[str, str] = Field(default_factory=dict, alias="callbackUrls")


class PaymentIntegration(BaseModel):
    model_config = _FEATURE_CONFIG

    enabled: bool = False
    provider: Literal["stripe", "paypal", "square"] = "stripe"
    features: List[Literal["subscriptions", "one-time-payments", "webhooks"]] = Field(
        default_factory=list
    )


class ProjectFeatures(BaseModel):
    """Optional feature toggles consumed by feature-module collaborators."""

    model_config = _SHARED_CONFIG

    test_data_seeding: Optional[DataSeeding] = Field(
        default=None, alias="testDataSeeding"
    )
    api_documentation: Optional[ApiDocumentation] = Field(
        default=None, alias="apiDocumentation"
    )
    email_auth: Optional[EmailAuth] = Field(default=None, alias="emailAuth")
    oauth_providers: Optional[OAuthProviders] = Field(
        default=None, alias="oauthProviders"
    )
    payment_integration: Optional[PaymentIntegration] = Field(
        default=None, alias="paymentIntegration"
    )

    @computed_field  # type: ignore[misc]
    @property
    def enabled_features(self) -> List[str]:
        names: List[str] = []
        for attr in (
            "test_data_seeding",
            "api_documentation",
            "email_auth",
            "oauth_providers",
            "payment_integration",
        ):
            block: Optional[BaseModel] = getattr(self, attr)
            if block is not None and getattr(block, "enabled", False):
                names.append(attr)
        return names


# ---------------------------------------------------------------------------
# Root: Workflow
# ---------------------------------------------------------------------------


class Workflow(BaseModel):
    """
    The compilation unit: one project and its entities.

    Entity order is significant; it is the emission order of the storage
    schema.
    """

    model_config = _SHARED_CONFIG

    id: Optional[str] = Field(default=None, description="Opaque project identifier.")
    name: str = Field(..., description="Project name.")
    entities: List[Entity] = Field(
        default_factory=list,
        validation_alias=AliasChoices("workflows", "entities"),
        serialization_alias="workflows",
    )
    cors: Optional[CorsOptions] = None
    features: Optional[ProjectFeatures] = None

    @computed_field  # type: ignore[misc]
    @property
    def entity_count(self) -> int:
        return len(self.entities)

    @computed_field  # type: ignore[misc]
    @property
    def entity_names(self) -> List[str]:
        return [e.name for e in self.entities]

    def find_entity(self, name: str) -> Optional[Entity]:
        """Case-insensitive lookup; returns the first declared match."""
        wanted: str = name.lower()
        for entity in self.entities:
            if entity.name.lower() == wanted:
                return entity
        return None

    def __repr__(self) -> str:
        return f"<Workflow {self.name} entities={len(self.entities)}>"


# ---------------------------------------------------------------------------
# Generation configuration
# ---------------------------------------------------------------------------


class GenerationConfig(BaseModel):
    """
    Per-request settings threaded through the compiler into every
    generator.  Nothing here is process-wide state.
    """

    model_config = _SHARED_CONFIG

    output_root: str = Field(
        default="./generated",
        min_length=1,
        description="Directory under which unique output containers are created.",
    )
    container_prefix: str = Field(
        default="entigen-", description="Prefix of the unique container directory."
    )
    default_page_size: int = Field(
        default=10, ge=1, description="Default ``take`` of generated list endpoints."
    )
    max_page_size: int = Field(
        default=100, ge=1, description="Upper bound on ``take`` of list endpoints."
    )
    datasource_provider: Literal[
        "postgresql", "mysql", "sqlite", "sqlserver", "cockroachdb"
    ] = Field(default="postgresql", description="Prisma datasource provider.")
    database_url_env: str = Field(
        default="DATABASE_URL",
        min_length=1,
        description="Environment variable holding the connection URL.",
    )

    @model_validator(mode="after")
    def _validate_page_sizes(self) -> "GenerationConfig":
        if self.default_page_size > self.max_page_size:
            raise ValueError(
                f"default_page_size ({self.default_page_size}) exceeds "
                f"max_page_size ({self.max_page_size})."
            )
        return self


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "FieldType",
    "KNOWN_FIELD_TYPES",
    "Cardinality",
    "MinLengthRule",
    "MaxLengthRule",
    "MinRule",
    "MaxRule",
    "PatternRule",
    "EmailRule",
    "UrlRule",
    "UuidRule",
    "EnumRule",
    "StartsWithRule",
    "EndsWithRule",
    "CustomRule",
    "ValidationRule",
    "Property",
    "Relation",
    "Entity",
    "CorsOptions",
    "DataSeeding",
    "ApiDocumentation",
    "EmailTemplates",
    "EmailAuth",
    "OAuthProviders",
    "PaymentIntegration",
    "ProjectFeatures",
    "Workflow",
    "GenerationConfig",
]

logger.debug("entigen.models loaded: %d public symbols.", len(__all__))
