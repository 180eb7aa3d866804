# chatplatform/db/__init__.py
from .base import Base
from .session import init_db_engine, get_db, get_engine, session_scope
from .models import User, Project, Prompt, Conversation, Message, File

__all__ = [
    "Base",
    "init_db_engine",
    "get_db",
    "get_engine",
    "session_scope",
    "User",
    "Project",
    "Prompt",
    "Conversation",
    "Message",
    "File",
]
