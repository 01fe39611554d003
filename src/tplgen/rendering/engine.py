"""Template rendering engine and build driver."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template
from jinja2 import TemplateError
from pydantic import BaseModel, Field

from ..core.errors import MissingFilesError, TemplateGenError
from ..core.freshness import OutputStatus, StatusKind
from ..core.models import BuildConfig, TemplateSpec
from .io import atomic_write_text, read_json

logger = logging.getLogger(__name__)


class BuildResult(BaseModel):
    """Outcome of processing one spec during a build."""

    name: str
    status: OutputStatus | None = Field(
        default=None, description="Freshness before building; None if not classified"
    )
    rendered: bool = False
    output: Path | None = None
    text: str | None = Field(default=None, description="Rendered text when no output")
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def make_environment(search_path: Path) -> Environment:
    """Jinja2 environment resolving templates and includes under ``search_path``."""
    return Environment(
        loader=FileSystemLoader(str(search_path)),
        undefined=StrictUndefined,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def compile_template(template_path: Path) -> Template:
    """Compile the template at ``template_path``.

    Raises:
        TemplateNotFound: If the file does not exist
        TemplateSyntaxError: If the template does not compile
    """
    return make_environment(template_path.parent).get_template(template_path.name)


def build_context(data: Any) -> dict[str, Any]:
    """Turn parsed JSON data into template context.

    Objects become keyword context; any other value is exposed as ``data``.
    """
    if isinstance(data, dict):
        return data
    return {"data": data}


def render_spec(spec: TemplateSpec, file_mode: int = 0o644) -> str:
    """Render a single spec, writing its output file when it has one.

    Args:
        spec: Spec to render
        file_mode: File permissions for the output

    Returns:
        Rendered text

    Raises:
        TemplateGenError: On read, parse, compile, render or write failure
    """
    logger.debug(f"Rendering template: {spec.template}")

    try:
        context = build_context(read_json(spec.data))
        template = compile_template(spec.template)
        rendered_text = template.render(**context)
        if spec.output is not None:
            atomic_write_text(spec.output, rendered_text, mode=file_mode)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, TemplateError) as exc:
        raise TemplateGenError.wrap(exc) from exc

    if spec.output is not None:
        logger.info(f"Rendered {spec.template} → {spec.output}")
    return rendered_text


def _rebase_output(spec: TemplateSpec, dest_root: Path | None) -> TemplateSpec:
    if dest_root is None or spec.output is None or spec.output.is_absolute():
        return spec
    return spec.model_copy(update={"output": dest_root / spec.output})


def build_spec(spec: TemplateSpec, config: BuildConfig) -> BuildResult:
    """Validate, classify and (when needed) render one spec.

    Failures are recorded on the result rather than raised.
    """
    spec = _rebase_output(spec, config.dest_root)
    result = BuildResult(name=spec.name, output=spec.output)

    try:
        spec.validate_files()
    except MissingFilesError as exc:
        logger.error(f"{spec.name}: {str(exc).rstrip()}")
        result.error = str(exc)
        return result

    status = spec.up_to_date()
    result.status = status

    if status.kind is StatusKind.CANNOT_DETERMINE:
        logger.warning(f"{spec.name}: cannot determine freshness: {status.error}")

    if not (config.force or status.should_build):
        logger.debug(f"{spec.name}: up to date")
        return result

    if config.dry_run:
        logger.info(f"{spec.name}: would build ({status})")
        return result

    try:
        text = render_spec(spec, config.file_mode)
    except TemplateGenError as exc:
        logger.error(f"{spec.name}: {exc}")
        result.error = str(exc)
        return result

    result.rendered = True
    if spec.output is None:
        result.text = text
    return result


def build_all(specs: Iterable[TemplateSpec], config: BuildConfig) -> list[BuildResult]:
    """Build every spec, continuing past failures.

    Args:
        specs: Specs to process
        config: Build options

    Returns:
        One result per spec, in input order
    """
    specs = list(specs)
    logger.info(f"Checking {len(specs)} template spec(s)")

    results = [build_spec(spec, config) for spec in specs]

    rendered = sum(1 for r in results if r.rendered)
    failed = sum(1 for r in results if not r.ok)
    logger.info(f"Rendered {rendered} file(s), {failed} failure(s)")
    return results


def statuses(specs: Iterable[TemplateSpec]) -> list[tuple[TemplateSpec, OutputStatus]]:
    """Classify each spec without validating or rendering it."""
    return [(spec, spec.up_to_date()) for spec in specs]

