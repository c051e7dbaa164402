"""Jinja2 environment for the server-rendered pages."""

from pathlib import Path

from fastapi.templating import Jinja2Templates

from ..config import get_settings

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["settings"] = get_settings()
