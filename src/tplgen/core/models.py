"""Domain models for template specs and build configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field

from .errors import MissingFilesError
from .freshness import OutputStatus, output_status


def _exists(path: Path) -> bool:
    """Like ``Path.exists`` but any lookup failure counts as absent."""
    try:
        return path.exists()
    except OSError:
        return False


class TemplateSpec(BaseModel):
    """One unit of work: render ``template`` with ``data`` into ``output``.

    Constructing a spec directly never touches the filesystem; use
    ``create`` to also check that the inputs exist.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Identifier of the spec")
    data: Path = Field(..., description="JSON data file")
    template: Path = Field(..., description="Template file")
    output: Path | None = Field(
        default=None, description="Output file; None means always build"
    )

    @classmethod
    def unchecked(
        cls,
        name: str,
        data: str | Path,
        template: str | Path,
        output: str | Path | None = None,
    ) -> TemplateSpec:
        return cls(name=name, data=data, template=template, output=output)

    @classmethod
    def create(
        cls,
        name: str,
        data: str | Path,
        template: str | Path,
        output: str | Path | None = None,
    ) -> TemplateSpec:
        """Build a spec and validate its input files.

        Raises:
            MissingFilesError: If the data or template file does not exist
        """
        spec = cls.unchecked(name, data, template, output)
        spec.validate_files()
        return spec

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> TemplateSpec:
        return cls.model_validate(record)

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def validate_files(self) -> None:
        """Check that both input files exist, reporting every missing one.

        Raises:
            MissingFilesError: Template message first, then data message
        """
        data_exists = _exists(self.data)
        template_exists = _exists(self.template)

        if data_exists and template_exists:
            return

        missing: list[str] = []
        if not template_exists:
            missing.append(f"template file: {self.template}")
        if not data_exists:
            missing.append(f"data file: {self.data}")
        raise MissingFilesError(missing)

    def up_to_date(self) -> OutputStatus:
        return output_status(self.data, self.template, self.output)

    def should_build(self) -> bool:
        return self.up_to_date().should_build


class BuildConfig(BaseModel):
    """Options for one build run."""

    manifest: Path | None = Field(default=None, description="Manifest file")
    dest_root: Path | None = Field(
        default=None, description="Base directory for relative output paths"
    )
    file_mode: int = Field(default=0o644, description="File permissions (octal)")
    force: bool = Field(default=False, description="Render even up-to-date specs")
    dry_run: bool = Field(default=False, description="Classify without rendering")
