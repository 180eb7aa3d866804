"""Multi-tenant chatbot project platform: REST + SSE API over an upstream chat-completion service."""

__version__ = "1.0.0"
