# app/asgi.py
from app.main import app  # noqa: F401
