# chatplatform/api/routers/chat.py
"""
Chat API routes: conversation history plus the buffered and streaming
relay to the upstream chat-completion API.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from chatplatform.api.deps import CurrentUser, get_current_user, get_db, get_llm_client
from chatplatform.api.schemas import SendMessageRequest, serialize_conversation, serialize_message
from chatplatform.chat import ChatService
from chatplatform.core.exceptions import UpstreamError
from chatplatform.db import storage
from chatplatform.db.models import Conversation
from chatplatform.llm.client import ChatCompletionClient
from chatplatform.utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(prefix="/api/chat", tags=["Chat"])

SEND_FAILURE = "Failed to send message"


# =============================================================================
# Conversations
# =============================================================================

@router.get("/project/{project_id}/conversations")
async def list_conversations(
    project_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Project conversations, most recently active first, with message counts."""
    project = storage.get_owned_project(db, project_id, current_user.id)
    conversations = (
        db.query(Conversation)
        .filter(Conversation.project_id == project.id)
        .order_by(Conversation.updated_at.desc())
        .all()
    )
    counts = storage.conversation_message_counts(db, [c.id for c in conversations])
    return {
        "conversations": [
            serialize_conversation(c, message_count=counts[c.id])
            for c in conversations
        ]
    }


@router.get("/conversations/{conversation_id}/messages")
async def get_messages(
    conversation_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    conversation = storage.get_owned_conversation(db, conversation_id, current_user.id)
    history = storage.get_history(db, conversation.id)
    return {
        "messages": [serialize_message(m) for m in history],
        "conversation": serialize_conversation(conversation),
    }


@router.delete("/conversations/{conversation_id}")
async def delete_conversation(
    conversation_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    conversation = storage.get_owned_conversation(db, conversation_id, current_user.id)
    storage.delete_conversation(db, conversation)
    return {"message": "Conversation deleted successfully"}


@router.get("/models")
async def list_models(
    current_user: CurrentUser = Depends(get_current_user),
    llm: ChatCompletionClient = Depends(get_llm_client),
):
    """Models offered by the upstream API, or a fixed fallback list."""
    return {"models": await llm.list_models()}


# =============================================================================
# Relay
# =============================================================================

@router.post("/project/{project_id}/send")
async def send_message(
    project_id: str,
    request: SendMessageRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    llm: ChatCompletionClient = Depends(get_llm_client),
):
    """
    Buffered chat turn: one upstream call, reply returned in full.

    **Errors:**
    - 404: Project not found
    - 500: Upstream call failed (the user message stays recorded)
    """
    project = storage.get_owned_project(db, project_id, current_user.id)
    service = ChatService(db, llm)

    try:
        assistant, conversation_id = await service.send(project, request.message, request.conversation_id)
    except UpstreamError as e:
        logger.error(f"Send failed in project {project.id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SEND_FAILURE)

    return {"message": serialize_message(assistant), "conversationId": conversation_id}


@router.post("/project/{project_id}/stream")
async def stream_message(
    project_id: str,
    request: SendMessageRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    llm: ChatCompletionClient = Depends(get_llm_client),
):
    """
    Streaming chat turn over server-sent events.

    Events: conversationId, then one chunk per delta, then done with the
    persisted message id, or a terminal error. Ownership and validation
    failures are plain JSON errors returned before the stream opens.
    """
    project = storage.get_owned_project(db, project_id, current_user.id)
    service = ChatService(db, llm)
    turn = service.prepare_turn(project, request.message, request.conversation_id)

    return StreamingResponse(
        service.relay(turn),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
