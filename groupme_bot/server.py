"""
Webhook listener for GroupMe bot callbacks.
"""

import json
import logging

from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.responses import PlainTextResponse

from .dispatcher import Dispatcher
from .models import Message

logger = logging.getLogger(__name__)


def create_app(dispatcher: Dispatcher, title: str = "GroupMe Bot") -> FastAPI:
    """
    Build the webhook app around a dispatcher.

    GroupMe only needs a quick acknowledgement, so messages are dispatched
    in the background after the response is sent.
    """
    app = FastAPI(title=title, docs_url=None, redoc_url=None)

    @app.post("/", response_class=PlainTextResponse)
    async def receive_message(request: Request, background_tasks: BackgroundTasks):
        """GroupMe callback URL."""
        body = await request.body()

        try:
            payload = json.loads(body)
        except ValueError as e:
            logger.warning(f"Ignoring undecodable callback body: {e}")
            return "OK"

        if not isinstance(payload, dict):
            logger.warning(f"Ignoring callback body of type {type(payload).__name__}")
            return "OK"

        background_tasks.add_task(dispatcher.dispatch, Message.from_payload(payload))
        return "OK"

    @app.api_route("/", methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"])
    async def invalid_method():
        return PlainTextResponse("Invalid request method!", status_code=400)

    @app.get("/health")
    async def health_check():
        """Simple liveness probe."""
        return {
            "status": "healthy",
            "features": len(dispatcher.registry),
        }

    return app
