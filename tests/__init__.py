# tests/__init__.py
"""
Test suite for the chatbot platform API.

Test categories:
- unit/       : Unit tests for individual components
- integration/: HTTP-level tests through the FastAPI test client
"""
