"""FastAPI application receiving GitHub webhook deliveries.

Each delivery is handled inside its own request task; the router awaits every
GitHub and Jira call, so slow remotes never block other deliveries.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from github import GithubException

from issuelink_core.events import EventRouter
from issuelink_tracker.base import TrackerError

logger = logging.getLogger(__name__)


def create_app(router: EventRouter) -> FastAPI:
    """Build the webhook application around a configured EventRouter."""
    app = FastAPI(title="issuelink", docs_url=None, redoc_url=None)
    app.state.router = router

    @app.get("/health")
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    @app.post("/webhook")
    async def webhook(request: Request) -> JSONResponse:
        event = request.headers.get("X-GitHub-Event")
        if not event:
            return JSONResponse({"detail": "Missing X-GitHub-Event header"}, status_code=400)
        try:
            payload = await request.json()
        except ValueError:
            return JSONResponse({"detail": "Body is not valid JSON"}, status_code=400)
        if not isinstance(payload, dict):
            return JSONResponse({"detail": "Body must be a JSON object"}, status_code=400)

        action = payload.get("action")
        delivery = request.headers.get("X-GitHub-Delivery", "-")
        try:
            status = await app.state.router.dispatch(event, payload)
        except (GithubException, TrackerError) as e:
            logger.error("Delivery %s (%s/%s) failed: %s", delivery, event, action, e)
            return JSONResponse(
                {"event": event, "action": action, "status": "failed", "detail": str(e)},
                status_code=502,
            )

        logger.debug("Delivery %s (%s/%s): %s", delivery, event, action, status)
        return JSONResponse({"event": event, "action": action, "status": status})

    return app
