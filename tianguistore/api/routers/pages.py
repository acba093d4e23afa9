"""Entry-page router mapping bare paths to HTML documents in the public directory."""

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

PAGE_ROUTES: tuple[tuple[str, str], ...] = (
    ("/", "index.html"),
    ("/login", "login.html"),
    ("/carrito", "carrito.html"),
    ("/registro", "registro.html"),
)


def api_create_page_router(public_directory: str) -> APIRouter:
    """Create the page router for the fixed entry pages.

    Args:
        public_directory: Directory holding the HTML documents.

    Returns:
        APIRouter: Router exposing one GET and HEAD route per entry page.
    """

    router = APIRouter(tags=["pages"])
    for path, file_name in PAGE_ROUTES:
        router.add_api_route(
            path,
            _api_build_page_endpoint(Path(public_directory) / file_name),
            methods=["GET", "HEAD"],
            response_class=FileResponse,
            include_in_schema=False,
        )
    return router


def _api_build_page_endpoint(page_path: Path):
    def api_page() -> FileResponse:
        return FileResponse(page_path, media_type="text/html")

    return api_page
