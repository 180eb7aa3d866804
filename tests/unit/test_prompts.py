# tests/unit/test_prompts.py
"""
Unit tests for system prompt assembly, conversation titles and SSE events.
"""

import json
from types import SimpleNamespace

from chatplatform.chat.service import title_from_message
from chatplatform.llm.events import StreamEvent, StreamEventType
from chatplatform.llm.prompts import build_system_prompt, history_to_messages


class TestBuildSystemPrompt:

    def test_without_prompts(self):
        project = SimpleNamespace(system_prompt="You are support.")
        assert build_system_prompt(project, []) == "You are support."

    def test_prompts_appended_in_order(self):
        project = SimpleNamespace(system_prompt="You are support.")
        prompts = [
            SimpleNamespace(name="Tone", content="Be friendly."),
            SimpleNamespace(name="Hours", content="9 to 5."),
        ]

        assert build_system_prompt(project, prompts) == (
            "You are support."
            "\n\nAdditional context:\n"
            "\nTone:\nBe friendly.\n"
            "\nHours:\n9 to 5.\n"
        )

    def test_history_to_messages(self):
        history = [
            SimpleNamespace(role="user", content="Hi"),
            SimpleNamespace(role="assistant", content="Hello"),
        ]
        assert history_to_messages(history) == [
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello"},
        ]


class TestConversationTitle:

    def test_short_message_kept(self):
        assert title_from_message("Hello") == "Hello"

    def test_exactly_fifty_characters_not_marked(self):
        message = "a" * 50
        assert title_from_message(message) == message

    def test_long_message_truncated(self):
        message = "b" * 51
        assert title_from_message(message) == "b" * 50 + "..."


class TestStreamEvent:

    def test_sse_framing(self):
        sse = StreamEvent.chunk("Hi").to_sse()

        assert sse.startswith("data: ")
        assert sse.endswith("\n\n")
        assert json.loads(sse[len("data: "):]) == {"type": "chunk", "content": "Hi"}

    def test_event_payloads(self):
        assert StreamEvent.conversation_id("c1").to_dict() == {"type": "conversationId", "conversationId": "c1"}
        assert StreamEvent.done(7).to_dict() == {"type": "done", "messageId": 7}
        assert StreamEvent.error("Failed").to_dict() == {"type": "error", "message": "Failed"}
        assert StreamEvent.done().event_type is StreamEventType.DONE

    def test_non_ascii_content_preserved(self):
        sse = StreamEvent.chunk("Καλημέρα").to_sse()
        assert "Καλημέρα" in sse
