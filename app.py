# app.py
"""
Thin entrypoint for the API.

Usage example:
    uvicorn app:app --reload
"""

from pos_api.main import app  # re-export FastAPI instance
