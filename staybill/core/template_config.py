"""Jinja2 template configuration for plain-text guest messages."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

# Template directory is at staybill/templates/
BASE_DIR = Path(__file__).resolve().parent.parent
templates = Environment(
    loader=FileSystemLoader(str(BASE_DIR / "templates")),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=False,
    undefined=StrictUndefined,
)
