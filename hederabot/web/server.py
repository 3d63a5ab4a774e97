"""
HTTP Front End
==============

A small FastAPI app exposing the agent over HTTP.

Routes:
    POST /api/chat     {"message": "...", "accountId"?: "...", "privateKey"?: "..."}
                       → {"content": "..."}
    GET  /api/health   → {"status": "ok", "model": "...", "tools": [...]}

Requests without credentials share the app's default session. Requests
that carry an accountId or privateKey get a fresh session that is closed
as soon as the reply is sent.

Errors:
    400 {"error": "message is required"}
    502 {"error": ...}  the reasoner could not be reached
    500 {"error": ...}  anything else
"""

from contextlib import asynccontextmanager
from typing import Any, Callable

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from hederabot.agent.session import create_session
from hederabot.errors import ReasonerUnavailable
from hederabot.utils.config import Config, get_config
from hederabot.utils.logger import Logger

logger = Logger("Web")


class ChatRequest(BaseModel):
    message: Any = None
    accountId: str | None = None
    privateKey: str | None = None


class ChatResponse(BaseModel):
    content: str


def create_app(
    config: Config | None = None,
    session_factory: Callable = create_session
) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        config: Configuration; loaded from the environment when omitted
        session_factory: Async context manager factory with the signature
            of create_session (tests substitute their own)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app_config = config or get_config()
        app.state.config = app_config
        async with session_factory(app_config) as session:
            app.state.session = session
            logger.info(f"Default session ready ({len(session.registry)} tools)")
            yield

    app = FastAPI(title="Hedera Assistant", lifespan=lifespan)

    @app.get("/api/health")
    async def health():
        session = app.state.session
        return {
            "status": "ok",
            "model": session.agent.model,
            "tools": session.registry.list_names(),
        }

    @app.post("/api/chat", response_model=ChatResponse)
    async def chat(request: ChatRequest):
        if not isinstance(request.message, str) or not request.message.strip():
            return JSONResponse(status_code=400, content={"error": "message is required"})

        logger.info(f"Chat request: {request.message[:50]}")

        try:
            if request.accountId or request.privateKey:
                async with session_factory(
                    app.state.config,
                    account_id=request.accountId,
                    private_key=request.privateKey,
                ) as session:
                    result = await session.dispatch(request.message)
            else:
                result = await app.state.session.dispatch(request.message)

        except ReasonerUnavailable as e:
            logger.error("Reasoner unavailable", e)
            return JSONResponse(status_code=502, content={"error": str(e)})
        except Exception as e:
            logger.error("Error handling chat request", e)
            return JSONResponse(status_code=500, content={"error": str(e) or "Unexpected error"})

        return ChatResponse(content=result.content)

    return app


def serve(config: Config | None = None) -> None:
    """Run the HTTP front end with uvicorn."""
    config = config or get_config()
    logger.info(f"Web app listening on http://{config.server.host}:{config.server.port}")
    uvicorn.run(create_app(config), host=config.server.host, port=config.server.port)
