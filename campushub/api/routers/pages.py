from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse, HTMLResponse

from campushub.core.config import STATIC_DIR

router = APIRouter()


def _static_root() -> Path:
    return Path(STATIC_DIR).resolve()


def _page(name: str):
    path = _static_root() / name
    if path.is_file():
        return FileResponse(path)
    return HTMLResponse(f"<h2>{name} not found</h2>", status_code=404)


@router.get("/admin", include_in_schema=False)
def admin_page():
    return _page("admin.html")


@router.get("/{path:path}", include_in_schema=False)
def static_or_login(path: str):
    """Serve frontend files; anything else gets the login page."""
    root = _static_root()
    if path:
        candidate = (root / path).resolve()
        if candidate.is_file() and candidate.is_relative_to(root):
            return FileResponse(candidate)
    return _page("login.html")
