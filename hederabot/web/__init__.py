"""
Web Front End
=============

FastAPI app serving POST /api/chat.
"""

from hederabot.web.server import create_app, serve

__all__ = ["create_app", "serve"]
