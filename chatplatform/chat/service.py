# chatplatform/chat/service.py
"""
Chat relay: resolves the conversation, records the user message, assembles
the upstream request and records the assistant reply, either after one
buffered completion or after relaying a stream of deltas to the browser.
"""

from dataclasses import dataclass
from typing import AsyncIterator, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from chatplatform.db import storage
from chatplatform.db.models import Conversation, Message, Project
from chatplatform.db.session import session_scope
from chatplatform.core.exceptions import NotFoundError
from chatplatform.llm.client import ChatCompletionClient
from chatplatform.llm.events import StreamEvent
from chatplatform.llm.prompts import build_system_prompt, history_to_messages
from chatplatform.utils.logger import setup_logger

logger = setup_logger(__name__)

TITLE_MAX_CHARS = 50
STREAM_FAILURE = "Failed to stream response"


def title_from_message(message: str) -> str:
    title = message[:TITLE_MAX_CHARS]
    if len(message) > TITLE_MAX_CHARS:
        title += "..."
    return title


@dataclass
class ChatTurn:
    """Everything needed to call upstream for one user message."""
    conversation: Conversation
    model: str
    system_prompt: str
    messages: List[Dict[str, str]]

    @property
    def conversation_id(self) -> str:
        return self.conversation.id


class ChatService:
    """
    High-level chat operations.
    Bridge between the chat routes, storage and the upstream client.
    """

    def __init__(self, db: Session, llm: ChatCompletionClient):
        self.db = db
        self.llm = llm

    def resolve_conversation(self, project: Project, message: str, conversation_id: Optional[str]) -> Conversation:
        """Existing conversation of this project, or a new one titled from the message."""
        conversation = None
        if conversation_id:
            conversation = storage.find_project_conversation(self.db, conversation_id, project.id)

        if conversation is None:
            conversation = Conversation(title=title_from_message(message), project_id=project.id)
            self.db.add(conversation)
            self.db.commit()
            self.db.refresh(conversation)
            logger.info(f"Created conversation {conversation.id} in project {project.id}")

        return conversation

    def prepare_turn(self, project: Project, message: str, conversation_id: Optional[str] = None) -> ChatTurn:
        conversation = self.resolve_conversation(project, message, conversation_id)
        storage.add_message(self.db, conversation, "user", message)

        history = storage.get_history(self.db, conversation.id)
        return ChatTurn(
            conversation=conversation,
            model=project.ai_model,
            system_prompt=build_system_prompt(project, project.prompts),
            messages=history_to_messages(history),
        )

    async def send(self, project: Project, message: str, conversation_id: Optional[str] = None) -> Tuple[Message, str]:
        """
        Buffered variant: one upstream call, reply persisted and returned.

        Raises:
            UpstreamError if the completion call fails (the user message
            stays recorded)
        """
        turn = self.prepare_turn(project, message, conversation_id)
        reply = await self.llm.complete(turn.model, turn.system_prompt, turn.messages)
        assistant = storage.add_message(self.db, turn.conversation, "assistant", reply)
        return assistant, turn.conversation_id

    async def relay(self, turn: ChatTurn) -> AsyncIterator[str]:
        """
        Streaming variant: yields SSE lines for the browser.

        The conversation id goes out first; each upstream delta becomes a
        chunk event; the concatenated reply is persisted once, after the
        upstream finishes, and announced with a done event. Failures after
        the stream opened become a terminal error event.
        """
        yield StreamEvent.conversation_id(turn.conversation_id).to_sse()

        parts: List[str] = []
        try:
            async for delta in self.llm.stream(turn.model, turn.system_prompt, turn.messages):
                parts.append(delta)
                yield StreamEvent.chunk(delta).to_sse()

            full_response = "".join(parts)

            # The request-scoped session may already be closed once streaming starts
            with session_scope() as db:
                conversation = db.get(Conversation, turn.conversation_id)
                if conversation is None:
                    raise NotFoundError("Conversation")
                assistant = storage.add_message(db, conversation, "assistant", full_response)
                message_id = assistant.id

            logger.info(f"Streamed {len(parts)} chunks into conversation {turn.conversation_id}")
            yield StreamEvent.done(message_id).to_sse()

        except Exception as e:
            logger.error(f"Stream error in conversation {turn.conversation_id}: {e}")
            yield StreamEvent.error(STREAM_FAILURE).to_sse()
