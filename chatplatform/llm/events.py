# chatplatform/llm/events.py
"""
Streaming event types sent to the browser over server-sent events.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict
import json


class StreamEventType(Enum):
    """Types of streaming events."""
    CONVERSATION_ID = "conversationId"
    CHUNK = "chunk"
    DONE = "done"
    ERROR = "error"


@dataclass
class StreamEvent:
    """Single streaming event."""
    event_type: StreamEventType
    fields: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.event_type.value, **self.fields}

    def to_sse(self) -> str:
        """Convert to Server-Sent Events format."""
        return f"data: {json.dumps(self.to_dict(), ensure_ascii=False, default=str)}\n\n"

    @classmethod
    def conversation_id(cls, conversation_id: str) -> "StreamEvent":
        return cls(StreamEventType.CONVERSATION_ID, {"conversationId": conversation_id})

    @classmethod
    def chunk(cls, content: str) -> "StreamEvent":
        return cls(StreamEventType.CHUNK, {"content": content})

    @classmethod
    def done(cls, message_id: Any = None) -> "StreamEvent":
        return cls(StreamEventType.DONE, {"messageId": message_id} if message_id is not None else {})

    @classmethod
    def error(cls, message: str) -> "StreamEvent":
        return cls(StreamEventType.ERROR, {"message": message})
