"""Catch-all router answering requests that no earlier stage handled."""

from pathlib import Path

from fastapi import APIRouter, status
from fastapi.responses import FileResponse, HTMLResponse, Response

NOT_FOUND_FILE_NAME = "404.html"
NOT_FOUND_DOCUMENT = (
    "<!DOCTYPE html><html><head><meta charset=\"utf-8\"><title>404</title></head>"
    "<body><h1>404</h1><p>Page not found</p></body></html>"
)
FALLBACK_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def api_create_fallback_router(public_directory: str) -> APIRouter:
    """Create the fallback router. It must be included after every other router.

    Args:
        public_directory: Directory that may hold the `404.html` document.

    Returns:
        APIRouter: Router with a single catch-all route answering 404.
    """

    not_found_path = Path(public_directory) / NOT_FOUND_FILE_NAME
    router = APIRouter()

    @router.api_route("/{unmatched_path:path}", methods=FALLBACK_METHODS, include_in_schema=False)
    def api_not_found(unmatched_path: str) -> Response:
        """Return the not-found document.

        Args:
            unmatched_path: Request path that matched nothing.

        Returns:
            Response: HTTP 404 with `404.html`, or a built-in document when the file is absent.
        """

        _ = unmatched_path
        if not_found_path.is_file():
            return FileResponse(not_found_path, status_code=status.HTTP_404_NOT_FOUND, media_type="text/html")
        return HTMLResponse(NOT_FOUND_DOCUMENT, status_code=status.HTTP_404_NOT_FOUND)

    return router
