"""FastAPI app for the load balancer health check: any method, any path.

200 with the verdict comment when the node is available, 503 otherwise.
Override markers are checked first on every request; the probe is never run here."""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from clustercheck.core.verdict import Verdict, VerdictCell
from clustercheck.status_server.overrides import OverrideMarkers

logger = logging.getLogger(__name__)

_METHODS = ["GET", "HEAD", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"]


def current_response(cell: VerdictCell, overrides: Optional[OverrideMarkers]) -> Verdict:
    """Verdict to serve right now: a forced one if a marker exists, else the published one."""
    if overrides is not None:
        forced = overrides.evaluate()
        if forced is not None:
            return forced
    return cell.get()


def create_app(cell: VerdictCell, overrides: Optional[OverrideMarkers] = None) -> FastAPI:
    """Build the health check app around an already-owned verdict cell."""
    app = FastAPI(
        title="clustercheck",
        description="Galera node health check",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.api_route("/{path:path}", methods=_METHODS, response_class=PlainTextResponse)
    def check(request: Request, path: str) -> PlainTextResponse:
        verdict = current_response(cell, overrides)
        if not verdict.available:
            logger.debug("%s /%s -> 503 (%s)", request.method, path, verdict.reason.value)
        return PlainTextResponse(content=verdict.comment, status_code=verdict.status_code)

    return app
