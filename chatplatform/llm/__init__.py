from .client import ChatCompletionClient, get_llm_client, parse_stream_line
from .events import StreamEvent, StreamEventType
from .prompts import build_system_prompt, history_to_messages

__all__ = [
    "ChatCompletionClient",
    "get_llm_client",
    "parse_stream_line",
    "StreamEvent",
    "StreamEventType",
    "build_system_prompt",
    "history_to_messages",
]
