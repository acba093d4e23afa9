"""Static asset serving with fall-through for unmatched paths."""

from __future__ import annotations

from starlette.exceptions import HTTPException
from starlette.staticfiles import StaticFiles
from starlette.types import ASGIApp, Receive, Scope, Send

STATIC_METHODS = frozenset({"GET", "HEAD"})


class StaticAssetMiddleware:
    """Serve files from the public directory verbatim.

    Missing and unreadable files and directories are not answered here; the request continues
    to the router so page routes, route groups and the fallback can see it.
    """

    def __init__(self, app: ASGIApp, directory: str):
        self.app = app
        self._static_files = StaticFiles(directory=directory, check_dir=False)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] not in STATIC_METHODS:
            await self.app(scope, receive, send)
            return

        path = self._static_files.get_path(scope)
        try:
            response = await self._static_files.get_response(path, scope)
        except HTTPException as error:
            # 401 is how StaticFiles reports a PermissionError on lookup.
            if error.status_code not in (401, 404):
                raise
            await self.app(scope, receive, send)
            return
        await response(scope, receive, send)
