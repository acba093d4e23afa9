"""Liveness endpoint router."""

from fastapi import APIRouter, status
from fastapi.responses import PlainTextResponse

HEALTH_RESPONSE_BODY = "OK"


def api_create_health_router() -> APIRouter:
    """Create the liveness router.

    The endpoint reflects process liveness only. It never consults the data
    store, so it keeps answering during a dependency outage.

    Returns:
        APIRouter: Router exposing `GET` and `HEAD` on `/health`.
    """

    router = APIRouter(tags=["health"])

    @router.api_route("/health", methods=["GET", "HEAD"], response_class=PlainTextResponse)
    def api_health_status() -> PlainTextResponse:
        """Return the fixed liveness response.

        Returns:
            PlainTextResponse: HTTP 200 with body `OK`.
        """

        return PlainTextResponse(HEALTH_RESPONSE_BODY, status_code=status.HTTP_200_OK)

    return router
