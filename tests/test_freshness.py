"""Tests for output freshness classification."""

from __future__ import annotations

import errno
from pathlib import Path

import pytest

from tplgen.core import freshness
from tplgen.core.freshness import StatusKind, output_status
from tplgen.core.models import TemplateSpec

from .helpers import T_NEW, T_OLD, write_at


class TestUpToDate:
    def test_no_output_is_forced(self, inputs):
        data, template = inputs
        spec = TemplateSpec.unchecked("page", data, template)

        assert spec.up_to_date().kind is StatusKind.FORCED
        assert spec.should_build()

    def test_forced_without_touching_filesystem(self, tmp_path: Path):
        spec = TemplateSpec.unchecked("ghost", tmp_path / "nope.json", tmp_path / "nope.j2")

        assert spec.up_to_date().kind is StatusKind.FORCED

    def test_missing_output(self, spec: TemplateSpec):
        assert spec.up_to_date().kind is StatusKind.FILE_MISSING
        assert spec.should_build()

    def test_output_older_than_inputs(self, spec: TemplateSpec, tmp_path: Path):
        write_at(tmp_path / "output.rst", "old", T_OLD - 10)

        assert spec.up_to_date().kind is StatusKind.OUT_OF_DATE
        assert spec.should_build()

    def test_output_older_than_template_only(self, spec: TemplateSpec, tmp_path: Path):
        write_at(tmp_path / "output.rst", "old", T_OLD)
        write_at(spec.template, "{{ title }}", T_NEW)

        assert spec.up_to_date().kind is StatusKind.OUT_OF_DATE

    def test_output_older_than_data_only(self, spec: TemplateSpec, tmp_path: Path):
        write_at(tmp_path / "output.rst", "old", T_OLD)
        write_at(spec.data, '{"title": "changed"}', T_NEW)

        assert spec.up_to_date().kind is StatusKind.OUT_OF_DATE

    def test_output_newer_than_inputs(self, spec: TemplateSpec, tmp_path: Path):
        write_at(tmp_path / "output.rst", "fresh", T_NEW)

        assert spec.up_to_date().kind is StatusKind.UP_TO_DATE
        assert not spec.should_build()

    def test_equal_mtimes_are_up_to_date(self, spec: TemplateSpec, tmp_path: Path):
        write_at(tmp_path / "output.rst", "same", T_OLD)

        assert spec.up_to_date().kind is StatusKind.UP_TO_DATE
        assert not spec.should_build()

    def test_deleting_output_makes_it_missing(self, spec: TemplateSpec, tmp_path: Path):
        output = write_at(tmp_path / "output.rst", "fresh", T_NEW)
        assert spec.up_to_date().kind is StatusKind.UP_TO_DATE

        output.unlink()

        assert spec.up_to_date().kind is StatusKind.FILE_MISSING
        assert spec.data.exists() and spec.template.exists()


class TestCannotDetermine:
    def test_missing_input_with_existing_output(self, tmp_path: Path):
        output = write_at(tmp_path / "output.rst", "x", T_NEW)
        template = write_at(tmp_path / "template.j2", "x", T_OLD)

        status = output_status(tmp_path / "gone.json", template, output)

        assert status.kind is StatusKind.CANNOT_DETERMINE
        assert isinstance(status.error, FileNotFoundError)
        assert status.should_build

    def test_stops_at_first_failed_lookup(self, spec: TemplateSpec, tmp_path: Path, monkeypatch):
        write_at(tmp_path / "output.rst", "x", T_NEW)
        looked_up: list[Path] = []
        real = freshness.get_mod_time

        def fake_get_mod_time(path: Path) -> int:
            looked_up.append(path)
            if path == spec.data:
                raise PermissionError(errno.EACCES, "Permission denied", str(path))
            return real(path)

        monkeypatch.setattr(freshness, "get_mod_time", fake_get_mod_time)

        status = spec.up_to_date()

        assert status.kind is StatusKind.CANNOT_DETERMINE
        assert isinstance(status.error, PermissionError)
        assert looked_up == [spec.output, spec.data]
        assert spec.should_build()

    def test_str_includes_error(self):
        status = freshness.cannot_determine(PermissionError("denied"))

        assert str(status) == "cannot determine (denied)"


@pytest.mark.parametrize(
    "status, expected",
    [
        (freshness.UP_TO_DATE, False),
        (freshness.FILE_MISSING, True),
        (freshness.OUT_OF_DATE, True),
        (freshness.FORCED, True),
    ],
)
def test_should_build_for_every_status(status, expected):
    assert status.should_build is expected


class TestUnreadablePaths:
    """Lookup failures other than "no such file" never escape classification."""

    def test_output_name_too_long(self, inputs, tmp_path: Path):
        data, template = inputs
        spec = TemplateSpec.unchecked("x", data, template, tmp_path / ("o" * 300))

        status = spec.up_to_date()

        assert status.kind is StatusKind.CANNOT_DETERMINE
        assert status.error.errno == errno.ENAMETOOLONG
        assert spec.should_build()

    def test_data_name_too_long(self, spec: TemplateSpec, tmp_path: Path):
        write_at(spec.output, "x", T_NEW)
        long_data = spec.model_copy(update={"data": tmp_path / ("d" * 300)})

        status = long_data.up_to_date()

        assert status.kind is StatusKind.CANNOT_DETERMINE
        assert status.error.errno == errno.ENAMETOOLONG

    def test_output_under_a_file_is_missing(self, spec: TemplateSpec, tmp_path: Path):
        beneath_file = spec.model_copy(update={"output": spec.data / "out.rst"})

        assert beneath_file.up_to_date().kind is StatusKind.FILE_MISSING
