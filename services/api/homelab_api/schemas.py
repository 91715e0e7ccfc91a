"""API schemas.

Pydantic models for request validation and response serialization.

Conventions:
- `*Create` models validate POST bodies.
- `*Update` models validate PUT bodies. Every field is optional and handlers
  apply only the fields the client actually sent (`exclude_unset=True`).
- `*Out` models are built from ORM rows (`from_attributes=True`).

Optional free-text fields treat an empty or whitespace-only string as "no
value" and store NULL, so clearing a form field clears the column.
"""

from datetime import datetime
from typing import Annotated, ClassVar

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, field_validator


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _require_http_url(value):
    if value is None:
        return value
    value = value.strip()
    if not value.lower().startswith(("http://", "https://")):
        raise ValueError("url must start with http:// or https://")
    return value


OptionalText = Annotated[str | None, BeforeValidator(_blank_to_none)]
HttpUrlText = Annotated[str, Field(min_length=1), AfterValidator(_require_http_url)]
OptionalHttpUrlText = HttpUrlText | None
RequiredText = Annotated[str, Field(min_length=1)]

DEFAULT_CATEGORY_COLOR = "#3B82F6"


def _color_or_default(value):
    return _blank_to_none(value) or DEFAULT_CATEGORY_COLOR


# null or blank resets to the default colour
ColorText = Annotated[str, BeforeValidator(_color_or_default)]


class _PartialUpdate(BaseModel):
    """Base for PUT bodies: fields listed in `required_fields` may be omitted but not nulled."""

    required_fields: ClassVar[tuple[str, ...]] = ()

    @field_validator("*")
    @classmethod
    def _reject_null(cls, value, info):
        if value is None and info.field_name in cls.required_fields:
            raise ValueError("field may not be null")
        return value


class _OrmModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------

class ServiceCreate(BaseModel):
    name: RequiredText
    url: HttpUrlText
    category: RequiredText
    description: OptionalText = None
    provider: OptionalText = None
    port: OptionalText = None
    location: OptionalText = None
    icon: OptionalText = None
    hidden: bool = False


class ServiceUpdate(_PartialUpdate):
    required_fields: ClassVar[tuple[str, ...]] = ("name", "url", "category", "hidden")

    name: RequiredText | None = None
    url: OptionalHttpUrlText = None
    category: RequiredText | None = None
    description: OptionalText = None
    provider: OptionalText = None
    port: OptionalText = None
    location: OptionalText = None
    icon: OptionalText = None
    hidden: bool | None = None


class ServiceOut(_OrmModel):
    id: int
    name: str
    url: str
    category: str
    description: str | None = None
    provider: str | None = None
    port: str | None = None
    location: str | None = None
    icon: str | None = None
    hidden: bool = False
    status: str
    last_checked: datetime | None = None
    created_at: datetime | None = None


class ServiceStats(BaseModel):
    total: int = 0
    online: int = 0
    warning: int = 0
    offline: int = 0


class StatusCheckOut(BaseModel):
    id: int
    status: str
    last_checked: datetime


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

class CategoryCreate(BaseModel):
    name: RequiredText
    description: OptionalText = None
    color: ColorText = DEFAULT_CATEGORY_COLOR


class CategoryUpdate(_PartialUpdate):
    required_fields: ClassVar[tuple[str, ...]] = ("name",)

    name: RequiredText | None = None
    description: OptionalText = None
    color: ColorText = None


class CategoryOut(_OrmModel):
    id: int
    name: str
    description: str | None = None
    color: str | None = None
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# Quick links
# ---------------------------------------------------------------------------

class QuickLinkCreate(BaseModel):
    name: RequiredText
    url: RequiredText
    description: OptionalText = None
    icon: OptionalText = None
    category: str = "General"


class QuickLinkUpdate(_PartialUpdate):
    required_fields: ClassVar[tuple[str, ...]] = ("name", "url")

    name: RequiredText | None = None
    url: RequiredText | None = None
    description: OptionalText = None
    icon: OptionalText = None
    category: str | None = None


class QuickLinkOut(_OrmModel):
    id: int
    name: str
    url: str
    description: str | None = None
    icon: str | None = None
    category: str | None = None
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# RSS
# ---------------------------------------------------------------------------

class RssFeedCreate(BaseModel):
    name: RequiredText
    url: HttpUrlText
    description: OptionalText = None
    is_active: bool = True


class RssFeedUpdate(_PartialUpdate):
    required_fields: ClassVar[tuple[str, ...]] = ("name", "url", "is_active")

    name: RequiredText | None = None
    url: OptionalHttpUrlText = None
    description: OptionalText = None
    is_active: bool | None = None


class RssFeedOut(_OrmModel):
    id: int
    name: str
    url: str
    description: str | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RssItem(BaseModel):
    title: str
    link: str = ""
    description: str = ""
    pub_date: str = ""
    guid: str
    feed_name: str | None = None


# ---------------------------------------------------------------------------
# Widgets
# ---------------------------------------------------------------------------

class BitcoinQuote(BaseModel):
    price: float = 0
    change_24h: float = 0
    market_cap: float = 0
    volume: float = 0
    last_updated: str


class SystemHealth(BaseModel):
    cpu: float
    memory: float
    storage: float
    network_status: str
    network_down: float
    network_up: float
    source: str = "mock"


class GlancesSettingsIn(BaseModel):
    url: HttpUrlText
    username: OptionalText = None
    password: str | None = None
    enabled: bool = True


class GlancesSettingsOut(BaseModel):
    url: str
    username: str | None = None
    enabled: bool
    has_password: bool = False


class ConnectionTestResult(BaseModel):
    success: bool
    error: str | None = None
