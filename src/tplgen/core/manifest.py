"""Loading template specs from a JSON manifest."""

from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from .errors import TemplateGenError
from .models import TemplateSpec

logger = logging.getLogger(__name__)

_SPEC_LIST = TypeAdapter(list[TemplateSpec])


def _resolve(base: Path, path: Path) -> Path:
    return path if path.is_absolute() else base / path


def resolve_paths(
    spec: TemplateSpec, base: Path, output_base: Path | None = None
) -> TemplateSpec:
    """Return ``spec`` with relative paths anchored at ``base``.

    Relative outputs are anchored at ``output_base`` instead when it is given.
    """
    if output_base is None:
        output_base = base
    return spec.model_copy(
        update={
            "data": _resolve(base, spec.data),
            "template": _resolve(base, spec.template),
            "output": _resolve(output_base, spec.output) if spec.output else None,
        }
    )


def parse_manifest(
    text: str, base: Path | None = None, dest_root: Path | None = None
) -> list[TemplateSpec]:
    """Parse a JSON array of spec records.

    With ``base``, relative input paths are anchored there and relative
    outputs at ``dest_root`` (or ``base`` when no ``dest_root`` is given).

    Raises:
        TemplateGenError: PARSE kind for invalid JSON or records
    """
    try:
        specs = _SPEC_LIST.validate_python(json.loads(text))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise TemplateGenError.wrap(exc) from exc

    if base is not None:
        specs = [resolve_paths(spec, base, dest_root) for spec in specs]

    duplicates = [name for name, n in Counter(s.name for s in specs).items() if n > 1]
    if duplicates:
        logger.warning(f"Duplicate spec name(s) in manifest: {', '.join(duplicates)}")

    return specs


def load_manifest(path: Path, dest_root: Path | None = None) -> list[TemplateSpec]:
    """Load specs from a manifest file, anchoring paths at its directory.

    Relative outputs go under ``dest_root`` when it is given.

    Raises:
        TemplateGenError: IO kind if unreadable, PARSE kind if malformed
    """
    logger.debug(f"Loading manifest: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TemplateGenError.wrap(exc) from exc

    specs = parse_manifest(text, base=path.parent, dest_root=dest_root)
    logger.debug(f"Loaded {len(specs)} spec(s) from {path}")
    return specs
