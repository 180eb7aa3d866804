from .auth import router as auth_router
from .projects import router as projects_router
from .prompts import router as prompts_router
from .chat import router as chat_router
from .files import router as files_router
from .admin import router as admin_router

__all__ = [
    "auth_router",
    "projects_router",
    "prompts_router",
    "chat_router",
    "files_router",
    "admin_router",
]
