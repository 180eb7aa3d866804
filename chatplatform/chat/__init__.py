"""
Chat relay module.
"""

from chatplatform.chat.service import ChatService, ChatTurn, title_from_message

__all__ = ["ChatService", "ChatTurn", "title_from_message"]
