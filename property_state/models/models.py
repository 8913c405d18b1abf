import uuid
from datetime import datetime
from typing import List, Optional

from bcrypt import checkpw, gensalt, hashpw
from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.get_db import Base

from .enums import PostType, PropertyTypes
from .utils import utcnow


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    avatar: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    posts: Mapped[List["Post"]] = relationship(
        "Post", back_populates="user", foreign_keys="Post.user_id"
    )

    def set_password(self, raw_password: str):
        salt = gensalt()
        self.hashed_password = hashpw(raw_password.encode("utf-8"), salt).decode(
            "utf-8"
        )

    def check_password(self, raw_password: str) -> bool:
        return checkpw(
            raw_password.encode("utf-8"), self.hashed_password.encode("utf-8")
        )

    def normalize(self) -> None:
        self.username = self.username.strip()
        self.email = self.email.strip().lower()

    def __repr__(self):
        return f"<User {self.username} ({self.id})>"


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    images: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    address: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    city: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    bedroom: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    bathroom: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # Coordinates are kept as text; the create path never writes them.
    latitude: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    longitude: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    type: Mapped[str] = mapped_column(
        String(20), default=PostType.RENT.value, nullable=False, index=True
    )
    property: Mapped[str] = mapped_column(
        String(20), default=PropertyTypes.APARTMENT.value, nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    user: Mapped["User"] = relationship(
        "User", back_populates="posts", foreign_keys=[user_id], lazy="raise"
    )
    post_detail: Mapped[Optional["PostDetail"]] = relationship(
        "PostDetail",
        back_populates="post",
        uselist=False,
        lazy="raise",
        passive_deletes=True,
    )


class PostDetail(Base):
    __tablename__ = "post_details"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    desc: Mapped[str] = mapped_column(Text, default="", nullable=False)
    utilities: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    pet: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    income: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    size: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    school: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    bus: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    restaurant: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("posts.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    post: Mapped["Post"] = relationship(
        "Post", back_populates="post_detail", lazy="raise"
    )


class Chat(Base):
    __tablename__ = "chats"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_one_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    user_two_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    # Plain reference: removing the listing leaves this value in place.
    post_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True), nullable=True, index=True
    )
    user_one_unread: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    user_two_unread: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    user_one: Mapped["User"] = relationship(
        "User", foreign_keys=[user_one_id], lazy="raise"
    )
    user_two: Mapped["User"] = relationship(
        "User", foreign_keys=[user_two_id], lazy="raise"
    )
    messages: Mapped[List["Message"]] = relationship(
        "Message",
        back_populates="chat",
        order_by="Message.created_at",
        lazy="raise",
        passive_deletes=True,
    )

    @property
    def participant_ids(self) -> tuple[uuid.UUID, uuid.UUID]:
        return (self.user_one_id, self.user_two_id)

    def has_participant(self, user_id: uuid.UUID) -> bool:
        return user_id in self.participant_ids

    def other_participant_id(self, user_id: uuid.UUID) -> uuid.UUID:
        return self.user_two_id if user_id == self.user_one_id else self.user_one_id

    def unread_for(self, user_id: uuid.UUID) -> int:
        if user_id == self.user_one_id:
            return self.user_one_unread
        return self.user_two_unread


class Message(Base):
    __tablename__ = "messages"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    chat_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("chats.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )

    chat: Mapped["Chat"] = relationship(
        "Chat", back_populates="messages", lazy="raise"
    )
