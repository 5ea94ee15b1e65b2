"""
templating.py

Responsibility: Render the Jinja2 templates shipped in `mavenpub/templates`.

Rules:
- Undefined variables are errors (StrictUndefined).
- Only XML templates (`*.xml.j2`) are autoescaped; markdown is rendered verbatim.
- A single trailing newline is dropped so snippets compose without blank tails.

This module intentionally does NOT know about README files or publishing.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape


class RenderError(RuntimeError):
    pass


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(
        loader=PackageLoader("mavenpub", "templates"),
        autoescape=select_autoescape(enabled_extensions=("xml.j2",), default_for_string=False),
        undefined=StrictUndefined,
        keep_trailing_newline=False,
    )


def render(template_name: str, **context: Any) -> str:
    """Render a packaged template by name with the given context."""
    try:
        template = _environment().get_template(template_name)
        return template.render(**context)
    except Exception as e:  # noqa: BLE001 - surface as RenderError
        raise RenderError(f"Failed rendering template: {template_name}") from e


__all__ = ["RenderError", "render"]
