"""CLI argument parsers and validators."""

from __future__ import annotations

from pathlib import Path

import typer


def parse_file_mode(value: str) -> int:
    """Parse octal file mode string."""
    try:
        return int(value, 8)
    except ValueError as e:
        raise typer.BadParameter(f"Invalid octal mode: {value!r}") from e


def spec_name_for(template: Path) -> str:
    """Derive a spec name from a template path (``page.html.j2`` -> ``page``)."""
    return template.name.split(".", 1)[0] or template.name
