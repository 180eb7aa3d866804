#!/usr/bin/env python3
# scripts/run.py
"""
Run the chatbot platform API.

Usage:
    python scripts/run.py              # Host/port from configuration
    python scripts/run.py --reload     # Auto-reload for development
    python scripts/run.py --port 8080
"""

import sys
import argparse
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


def check_environment():
    """Warn about settings that only work for local development."""
    from chatplatform.config import SECURITY, LLM
    from chatplatform.utils.logger import setup_logger

    logger = setup_logger(__name__)
    logger.info("Checking environment...")

    if SECURITY.secret_key == "dev_secret_key_CHANGE_ME_IN_PROD":
        logger.warning("JWT_SECRET is not set; using the development signing key")
    if not LLM.api_key:
        logger.warning("OPENROUTER_API_KEY is not set; chat requests will fail")
    if not SECURITY.admin_secret_key:
        logger.info("ADMIN_SECRET_KEY is not set; /api/auth/create-admin is disabled")


def start_server(host: str, port: int, reload: bool = False):
    """Start the FastAPI server."""
    from chatplatform.config import SERVER
    from chatplatform.utils.logger import setup_logger

    logger = setup_logger(__name__)
    logger.info("Starting FastAPI server...")
    logger.info(f"   Host: {host}")
    logger.info(f"   Port: {port}")
    logger.info(f"   API docs: http://{host}:{port}/docs")

    import uvicorn

    uvicorn.run("chatplatform.main:app", host=host, port=port, reload=reload, log_level=SERVER.log_level.lower())


def main():
    from chatplatform.config import SERVER

    parser = argparse.ArgumentParser(description="Run the chatbot platform API")
    parser.add_argument("--host", type=str, default=SERVER.host)
    parser.add_argument("--port", type=int, default=SERVER.port)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    args = parser.parse_args()

    check_environment()
    start_server(args.host, args.port, args.reload)


if __name__ == "__main__":
    main()
