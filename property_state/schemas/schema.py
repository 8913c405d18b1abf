from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from models.enums import PostType, PropertyTypes

NumericInput = Union[int, float, str]

CAMEL_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "from_attributes": True,
}


class UserBase(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr

    model_config = CAMEL_CONFIG

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str):
        value = value.strip()
        if not value:
            raise ValueError("Username cannot be empty.")
        if any(ch.isspace() for ch in value):
            raise ValueError("Username cannot contain spaces.")
        return value

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower() if isinstance(value, str) else value


class UserCreate(UserBase):
    password: str = Field(
        ..., min_length=6, json_schema_extra={"type": "string", "format": "password"}
    )
    avatar: Optional[str] = None
    full_name: Optional[str] = None


class UserLoginInput(BaseModel):
    username: str
    password: str = Field(
        ..., min_length=1, json_schema_extra={"type": "string", "format": "password"}
    )


class UserUpdate(BaseModel):
    username: Optional[str] = Field(default=None, min_length=3, max_length=50)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)
    avatar: Optional[str] = None
    full_name: Optional[str] = None

    model_config = CAMEL_CONFIG


class UserPublicSchema(BaseModel):
    id: uuid.UUID
    username: str
    email: str
    avatar: Optional[str] = None
    full_name: Optional[str] = None
    created_at: datetime

    model_config = CAMEL_CONFIG


class LoginOut(UserPublicSchema):
    token: str


class PostDetailInput(BaseModel):
    desc: Optional[str] = None
    utilities: Optional[str] = None
    pet: Optional[str] = None
    income: Optional[str] = None
    size: Optional[NumericInput] = None
    school: Optional[NumericInput] = None
    bus: Optional[NumericInput] = None
    restaurant: Optional[NumericInput] = None


class PostCreate(BaseModel):
    """Body of ``POST /posts``.

    Required fields are checked by the service so that a missing title,
    price or city answers 400 rather than a schema error.
    """

    title: Optional[str] = None
    price: Optional[NumericInput] = None
    images: List[str] = Field(default_factory=list)
    address: Optional[str] = None
    city: Optional[str] = None
    bedroom: Optional[NumericInput] = None
    bathroom: Optional[NumericInput] = None
    latitude: Optional[Union[float, str]] = None
    longitude: Optional[Union[float, str]] = None
    type: Optional[PostType] = None
    property: Optional[PropertyTypes] = None
    post_detail: Optional[PostDetailInput] = None

    model_config = CAMEL_CONFIG


class PostUpdate(BaseModel):
    title: Optional[str] = None
    price: Optional[NumericInput] = None
    images: Optional[List[str]] = None
    address: Optional[str] = None
    city: Optional[str] = None
    bedroom: Optional[NumericInput] = None
    bathroom: Optional[NumericInput] = None
    latitude: Optional[Union[float, str]] = None
    longitude: Optional[Union[float, str]] = None
    type: Optional[PostType] = None
    property: Optional[PropertyTypes] = None
    post_detail: Optional[PostDetailInput] = None

    model_config = CAMEL_CONFIG


class OwnerInfo(BaseModel):
    id: str
    username: str
    email: str
    full_name: str
    avatar: Optional[str] = ""
    verified: bool = False
    show_contact_info: bool = True
    member_since: datetime
    location: str
    user_type: str = "standard"

    model_config = CAMEL_CONFIG


class PostDetailOut(BaseModel):
    id: uuid.UUID
    desc: str
    utilities: Optional[str] = None
    pet: Optional[str] = None
    income: Optional[str] = None
    size: Optional[int] = None
    school: Optional[int] = None
    bus: Optional[int] = None
    restaurant: Optional[int] = None
    post_id: uuid.UUID

    model_config = CAMEL_CONFIG


class PostOut(BaseModel):
    id: uuid.UUID
    title: str
    price: int
    images: List[str] = Field(default_factory=list)
    address: str
    city: str
    bedroom: int
    bathroom: int
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    type: str
    property: str
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    post_detail: Optional[PostDetailOut] = None
    owner_info: OwnerInfo

    model_config = CAMEL_CONFIG


class ChatCreate(BaseModel):
    receiver_id: str
    post_id: Optional[str] = None

    model_config = CAMEL_CONFIG


class MessageCreate(BaseModel):
    text: str

    @field_validator("text")
    @classmethod
    def validate_text(cls, value: str):
        if not value.strip():
            raise ValueError("Message text cannot be empty.")
        return value


class MessageOut(BaseModel):
    id: uuid.UUID
    text: str
    user_id: uuid.UUID
    chat_id: uuid.UUID
    created_at: datetime

    model_config = CAMEL_CONFIG


class ChatReceiverOut(BaseModel):
    id: uuid.UUID
    username: str
    avatar: Optional[str] = None

    model_config = CAMEL_CONFIG


class ChatOut(BaseModel):
    id: uuid.UUID
    user_ids: List[uuid.UUID]
    post_id: Optional[uuid.UUID] = None
    unread: int = 0
    last_message: Optional[str] = None
    receiver: Optional[ChatReceiverOut] = None
    created_at: datetime
    updated_at: datetime

    model_config = CAMEL_CONFIG


class ChatDetailOut(ChatOut):
    messages: List[MessageOut] = Field(default_factory=list)


class AuthenticatedOut(BaseModel):
    message: str
    user_id: uuid.UUID

    model_config = CAMEL_CONFIG


class CollectionCounts(BaseModel):
    users: int
    posts: int
    post_details: int
    chats: int
    messages: int

    model_config = CAMEL_CONFIG


class DbStatsOut(BaseModel):
    status: str
    collections: CollectionCounts


class TokenUserOut(BaseModel):
    id: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None


class AuthCheckOut(BaseModel):
    status: str
    user: TokenUserOut
