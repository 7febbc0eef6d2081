"""Database Models - Pydantic models for all entities."""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


def _to_decimal(value) -> Optional[Decimal]:
    """Convert a numeric column to Decimal, keeping NULL as None."""
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


class AppUser(BaseModel):
    """Row of the public ``users`` table (profile data)."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: Optional[str] = None
    email: Optional[str] = None


class Category(BaseModel):
    """Category model."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    order: int = 0

    @field_validator("name", mode="before")
    @classmethod
    def null_name(cls, v):
        return v or ""


class Business(BaseModel):
    """Business listing."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    description: Optional[str] = None
    phone: Optional[str] = None
    images: list[str] = []
    owner_id: Optional[str] = None
    status: str = "pending"  # pending | approved | rejected
    category_id: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def null_name(cls, v):
        return v or ""

    @field_validator("images", mode="before")
    @classmethod
    def null_images(cls, v):
        return v or []


class Product(BaseModel):
    """Product of a single business."""
    model_config = ConfigDict(extra="ignore")

    id: str
    business_id: str
    name: str
    description: Optional[str] = None
    price: Optional[Decimal] = None
    images: list[str] = []
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        return _to_decimal(v)

    @field_validator("images", mode="before")
    @classmethod
    def null_images(cls, v):
        return v or []


class Conversation(BaseModel):
    """Two-participant conversation, optionally scoped to a business."""
    model_config = ConfigDict(extra="ignore")

    id: str
    participant1_id: str
    participant2_id: str
    business_id: Optional[str] = None
    created_at: Optional[datetime] = None

    def has_participant(self, user_id: str) -> bool:
        return user_id in (self.participant1_id, self.participant2_id)

    def other_participant(self, user_id: str) -> str:
        return self.participant2_id if self.participant1_id == user_id else self.participant1_id


class Message(BaseModel):
    """Chat message."""
    model_config = ConfigDict(extra="ignore")

    id: str
    conversation_id: str
    sender_id: str
    content: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Session:
    """Authenticated identity for the current request."""
    user_id: str
    email: Optional[str] = None
    access_token: Optional[str] = None


@dataclass
class RequestContext:
    """
    Per-request state handed to every handler.

    Holds what the browser pages kept in module-level variables:
    the session user, the business being managed and the product
    being edited.
    """
    session: Optional[Session] = None
    business_id: Optional[str] = None
    editing_product_id: Optional[str] = None
    theme: str = "light"

    @property
    def user_id(self) -> Optional[str]:
        return self.session.user_id if self.session else None


@dataclass
class ProductForm:
    """Submitted product fields, before images are uploaded."""
    name: str
    description: str = ""
    price: str = ""


@dataclass
class ImageUpload:
    """A file picked in the product form."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"
