"""Shared test fixtures for tplgen."""

from __future__ import annotations

from pathlib import Path

import pytest

from tplgen.core.models import TemplateSpec

from .helpers import T_OLD, write_at


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch):
    for var in ("TPLGEN_MANIFEST", "TPLGEN_DEST_ROOT", "TPLGEN_FILE_MODE", "TPLGEN_VERBOSE"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def inputs(tmp_path: Path) -> tuple[Path, Path]:
    """A data file and a template file, both written at T_OLD."""
    data = write_at(tmp_path / "data.json", '{"title": "Hello", "items": [1, 2]}', T_OLD)
    template = write_at(
        tmp_path / "template.j2",
        "{{ title }}\n{% for i in items %}\n- {{ i }}\n{% endfor %}\n",
        T_OLD,
    )
    return data, template


@pytest.fixture
def spec(tmp_path: Path, inputs: tuple[Path, Path]) -> TemplateSpec:
    data, template = inputs
    return TemplateSpec.unchecked("page", data, template, tmp_path / "output.rst")
