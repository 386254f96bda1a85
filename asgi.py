"""
asgi.py -- Application assembly for TaskList.

This is the ONLY module that builds the app from the process environment.
api/main.py exposes create_app(); everything below it receives configuration
explicitly.

Run with:  uvicorn asgi:app --reload
           python main.py
"""

from api.main import create_app
from core.config import get_settings

app = create_app(get_settings())
