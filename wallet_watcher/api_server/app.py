"""
FastAPI/ASGI application entrypoint.

Run with: uvicorn wallet_watcher.api_server.app:app --host 0.0.0.0 --port 8080
(API only; no sync workers. Use main.py for the combined process.)
"""

from wallet_watcher.api_server.server import create_app

app = create_app()

__all__ = ["app"]
