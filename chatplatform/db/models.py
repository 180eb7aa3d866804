# chatplatform/db/models.py
from typing import List, Optional

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatplatform.db.base import Base

DEFAULT_SYSTEM_PROMPT = "You are a helpful AI assistant."
DEFAULT_CONVERSATION_TITLE = "New Conversation"

USER_ROLES = ("user", "admin")
MESSAGE_ROLES = ("user", "assistant", "system")


class User(Base):
    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
    )

    email: Mapped[str] = mapped_column(String(320), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(128))
    name: Mapped[str] = mapped_column(String(200))
    role: Mapped[str] = mapped_column(String(16), default="user")

    # One user has many projects
    projects: Mapped[List["Project"]] = relationship(back_populates="user", passive_deletes=True)

    def to_public(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "createdAt": self.created_at,
        }


class Project(Base):
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    system_prompt: Mapped[str] = mapped_column(Text, default=DEFAULT_SYSTEM_PROMPT)
    ai_model: Mapped[str] = mapped_column(String(200))
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)

    user: Mapped["User"] = relationship(back_populates="projects")
    prompts: Mapped[List["Prompt"]] = relationship(
        back_populates="project", passive_deletes=True, order_by="Prompt.created_at"
    )
    conversations: Mapped[List["Conversation"]] = relationship(back_populates="project", passive_deletes=True)
    files: Mapped[List["File"]] = relationship(back_populates="project", passive_deletes=True)


class Prompt(Base):
    name: Mapped[str] = mapped_column(String(200))
    content: Mapped[str] = mapped_column(Text)
    project_id: Mapped[str] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), index=True)

    project: Mapped["Project"] = relationship(back_populates="prompts")


class Conversation(Base):
    title: Mapped[str] = mapped_column(String(200), default=DEFAULT_CONVERSATION_TITLE)
    project_id: Mapped[str] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), index=True)

    project: Mapped["Project"] = relationship(back_populates="conversations")
    messages: Mapped[List["Message"]] = relationship(back_populates="conversation", passive_deletes=True)


class Message(Base):
    __table_args__ = (
        CheckConstraint("role IN ('user', 'assistant', 'system')", name="ck_messages_role"),
    )

    # Integer key keeps insertion order as a tiebreaker for equal timestamps
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    role: Mapped[str] = mapped_column(String(16))
    content: Mapped[str] = mapped_column(Text)
    conversation_id: Mapped[str] = mapped_column(ForeignKey("conversations.id", ondelete="CASCADE"), index=True)

    conversation: Mapped["Conversation"] = relationship(back_populates="messages")


class File(Base):
    filename: Mapped[str] = mapped_column(String(255))
    original_name: Mapped[str] = mapped_column(String(255))
    mime_type: Mapped[str] = mapped_column(String(255))
    size: Mapped[int] = mapped_column(Integer)
    project_id: Mapped[str] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), index=True)

    project: Mapped["Project"] = relationship(back_populates="files")
