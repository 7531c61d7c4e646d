"""FastAPI backend for DataLoom.

This module contains:
- The application factory and REST endpoints for datasets and analysis
- The chat endpoint for natural-language questions
"""

from dataloom.api.app import app, create_app
from dataloom.api.chat import router as chat_router

__all__ = [
    "app",
    "chat_router",
    "create_app",
]
