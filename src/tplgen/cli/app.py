"""Main CLI application."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer
from typing_extensions import Annotated

from ..core.errors import MissingFilesError, TemplateGenError
from ..core.manifest import load_manifest
from ..core.models import BuildConfig, TemplateSpec
from ..rendering import engine
from ..settings import Settings
from .parsers import parse_file_mode, spec_name_for

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="tplgen",
    help="Render Jinja2 templates from JSON data, rebuilding only stale outputs.",
)

ManifestOption = Annotated[
    Optional[Path],
    typer.Option(
        "--manifest",
        "-m",
        help="JSON manifest listing template specs (default: $TPLGEN_MANIFEST or tplgen.json).",
        metavar="FILE",
    ),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable verbose logging."),
]
ModeOption = Annotated[
    Optional[str],
    typer.Option("--mode", help="File permissions in octal (default: 0644).", metavar="OCTAL"),
]
DestRootOption = Annotated[
    Optional[Path],
    typer.Option(
        "--dest-root",
        help="Base directory for relative output paths (default: the manifest's directory).",
        metavar="DIR",
    ),
]
ForceOption = Annotated[
    bool,
    typer.Option("--force", "-f", help="Render even when outputs are up to date."),
]


def _configure_logging(settings: Settings, verbose: bool) -> None:
    verbose = verbose or settings.verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )


def _load_specs(
    settings: Settings, manifest: Path | None, dest_root: Path | None = None
) -> list[TemplateSpec]:
    try:
        return load_manifest(manifest or settings.manifest, dest_root)
    except TemplateGenError as exc:
        _fail(exc)


def _fail(exc: TemplateGenError) -> NoReturn:
    typer.echo(f"Error: {str(exc).rstrip()}", err=True)
    raise typer.Exit(code=1)


def _report(results: list[engine.BuildResult]) -> None:
    for result in results:
        if result.text is not None:
            typer.echo(result.text, nl=False)

    failures = [r for r in results if not r.ok]
    for result in failures:
        typer.echo(f"{result.name}: {str(result.error).rstrip()}", err=True)
    if failures:
        raise typer.Exit(code=1)


@app.command()
def build(
    manifest: ManifestOption = None,
    dest_root: DestRootOption = None,
    file_mode: ModeOption = None,
    force: ForceOption = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Report what would be rendered without writing."),
    ] = False,
    verbose: VerboseOption = False,
) -> None:
    """Render every stale spec in the manifest."""
    settings = Settings()
    _configure_logging(settings, verbose)

    config = BuildConfig(
        manifest=manifest or settings.manifest,
        dest_root=dest_root or settings.dest_root,
        file_mode=parse_file_mode(file_mode or settings.file_mode),
        force=force,
        dry_run=dry_run,
    )
    logger.debug(f"Config: {config}")

    specs = _load_specs(settings, config.manifest, config.dest_root)
    # Outputs are already anchored at dest_root by the loader.
    _report(engine.build_all(specs, config.model_copy(update={"dest_root": None})))


@app.command()
def status(
    manifest: ManifestOption = None,
    dest_root: DestRootOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Show the freshness of every spec in the manifest."""
    settings = Settings()
    _configure_logging(settings, verbose)

    for spec, output_status in engine.statuses(
        _load_specs(settings, manifest, dest_root or settings.dest_root)
    ):
        typer.echo(f"{spec.name}: {output_status}")


@app.command()
def check(
    manifest: ManifestOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Check that every spec's data and template files exist."""
    settings = Settings()
    _configure_logging(settings, verbose)

    failed = False
    for spec in _load_specs(settings, manifest):
        try:
            spec.validate_files()
        except MissingFilesError as exc:
            failed = True
            typer.echo(f"{spec.name}:", err=True)
            typer.echo(str(exc), err=True, nl=False)

    if failed:
        raise typer.Exit(code=1)
    typer.echo("All input files present.")


@app.command()
def render(
    data: Annotated[Path, typer.Argument(help="JSON data file.")],
    template: Annotated[Path, typer.Argument(help="Jinja2 template file.")],
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Output file. Without it the result is printed to stdout.",
            metavar="FILE",
        ),
    ] = None,
    file_mode: ModeOption = None,
    force: ForceOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Render a single template if its output is stale."""
    settings = Settings()
    _configure_logging(settings, verbose)
    mode = parse_file_mode(file_mode or settings.file_mode)

    try:
        spec = TemplateSpec.create(spec_name_for(template), data, template, output)
    except MissingFilesError as exc:
        _fail(exc)

    config = BuildConfig(dest_root=settings.dest_root, file_mode=mode, force=force)
    _report([engine.build_spec(spec, config)])


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
