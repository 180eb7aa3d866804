# chatplatform/api/__init__.py
"""
API module - routers, request schemas and shared dependencies.
"""

from chatplatform.api.routers import (
    auth_router,
    projects_router,
    prompts_router,
    chat_router,
    files_router,
    admin_router,
)

ALL_ROUTERS = [
    auth_router,
    projects_router,
    prompts_router,
    chat_router,
    files_router,
    admin_router,
]

__all__ = [
    "ALL_ROUTERS",
    "auth_router",
    "projects_router",
    "prompts_router",
    "chat_router",
    "files_router",
    "admin_router",
]
