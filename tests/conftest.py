"""Shared fixtures for pipeline and startup tests."""

from pathlib import Path

import pytest

PAGE_DOCUMENTS = {
    "index.html": "<html><body>home</body></html>",
    "login.html": "<html><body>login</body></html>",
    "carrito.html": "<html><body>carrito</body></html>",
    "registro.html": "<html><body>registro</body></html>",
    "404.html": "<html><body>not found page</body></html>",
}


@pytest.fixture
def public_directory(tmp_path: Path) -> Path:
    """Create a public directory with entry pages, a 404 document and one stylesheet.

    Args:
        tmp_path: Pytest temporary directory fixture.

    Returns:
        Path: Public directory path.
    """

    directory = tmp_path / "public"
    (directory / "css").mkdir(parents=True)
    for file_name, content in PAGE_DOCUMENTS.items():
        (directory / file_name).write_text(content, encoding="utf-8")
    (directory / "css" / "site.css").write_text("body { color: black; }", encoding="utf-8")
    (tmp_path / "secret.txt").write_text("do not serve", encoding="utf-8")
    return directory
