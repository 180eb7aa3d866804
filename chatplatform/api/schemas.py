# chatplatform/api/schemas.py
"""
Request models and response serializers.
JSON on the wire is camelCase; ORM attributes stay snake_case.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from chatplatform.db.models import User, Project, Prompt, Conversation, Message, File


# =============================================================================
# Request Models
# =============================================================================

class RegisterRequest(BaseModel):
    """User registration request. Any role in the body is ignored."""
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=2)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class CreateAdminRequest(BaseModel):
    """Admin bootstrap; fields are checked by the service after the secret."""
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    secret_key: Optional[str] = Field(None, alias="secretKey")


class ProjectCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    system_prompt: Optional[str] = Field(None, alias="systemPrompt")
    ai_model: Optional[str] = Field(None, alias="aiModel")


class ProjectUpdate(BaseModel):
    """Partial update; only fields present in the body are applied."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    system_prompt: Optional[str] = Field(None, alias="systemPrompt")
    ai_model: Optional[str] = Field(None, alias="aiModel")


class PromptCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)


class PromptUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)


class SendMessageRequest(BaseModel):
    """Chat turn request (buffered and streaming)."""
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., min_length=1)
    conversation_id: Optional[str] = Field(None, alias="conversationId")


class ResetPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_password: Optional[str] = Field(None, alias="newPassword")


# =============================================================================
# Serializers
# =============================================================================

def serialize_user(user: User, project_count: Optional[int] = None) -> Dict[str, Any]:
    data = user.to_public()
    if project_count is not None:
        data["_count"] = {"projects": project_count}
    return data


def serialize_project(project: Project) -> Dict[str, Any]:
    return {
        "id": project.id,
        "name": project.name,
        "description": project.description,
        "systemPrompt": project.system_prompt,
        "aiModel": project.ai_model,
        "userId": project.user_id,
        "createdAt": project.created_at,
        "updatedAt": project.updated_at,
    }


def serialize_prompt(prompt: Prompt) -> Dict[str, Any]:
    return {
        "id": prompt.id,
        "name": prompt.name,
        "content": prompt.content,
        "projectId": prompt.project_id,
        "createdAt": prompt.created_at,
        "updatedAt": prompt.updated_at,
    }


def serialize_conversation(conversation: Conversation, message_count: Optional[int] = None) -> Dict[str, Any]:
    data = {
        "id": conversation.id,
        "title": conversation.title,
        "projectId": conversation.project_id,
        "createdAt": conversation.created_at,
        "updatedAt": conversation.updated_at,
    }
    if message_count is not None:
        data["_count"] = {"messages": message_count}
    return data


def serialize_message(message: Message) -> Dict[str, Any]:
    return {
        "id": message.id,
        "role": message.role,
        "content": message.content,
        "conversationId": message.conversation_id,
        "createdAt": message.created_at,
    }


def serialize_file(record: File) -> Dict[str, Any]:
    return {
        "id": record.id,
        "filename": record.filename,
        "originalName": record.original_name,
        "mimeType": record.mime_type,
        "size": record.size,
        "projectId": record.project_id,
        "createdAt": record.created_at,
    }
