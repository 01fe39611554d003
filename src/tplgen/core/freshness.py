"""Output freshness classification from filesystem modification times."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class StatusKind(str, Enum):
    UP_TO_DATE = "up_to_date"
    FILE_MISSING = "file_missing"
    OUT_OF_DATE = "out_of_date"
    FORCED = "forced"
    CANNOT_DETERMINE = "cannot_determine"


class OutputStatus(BaseModel):
    """Freshness of one spec's output at the moment it was computed.

    ``error`` is only set for CANNOT_DETERMINE and holds the failed lookup.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: StatusKind
    error: OSError | None = None

    @property
    def should_build(self) -> bool:
        return self.kind is not StatusKind.UP_TO_DATE

    def __str__(self) -> str:
        label = self.kind.value.replace("_", " ")
        if self.error is not None:
            return f"{label} ({self.error})"
        return label


UP_TO_DATE = OutputStatus(kind=StatusKind.UP_TO_DATE)
FILE_MISSING = OutputStatus(kind=StatusKind.FILE_MISSING)
OUT_OF_DATE = OutputStatus(kind=StatusKind.OUT_OF_DATE)
FORCED = OutputStatus(kind=StatusKind.FORCED)


def cannot_determine(error: OSError) -> OutputStatus:
    return OutputStatus(kind=StatusKind.CANNOT_DETERMINE, error=error)


def get_mod_time(path: Path) -> int:
    """Modification time of ``path`` in nanoseconds."""
    return path.stat().st_mtime_ns


def output_status(data: Path, template: Path, output: Path | None) -> OutputStatus:
    """Classify whether ``output`` is fresh relative to ``data`` and ``template``.

    Modification times are read output, data, template, stopping at the first
    failure. A missing output is FILE_MISSING; any other I/O failure is
    returned as a CANNOT_DETERMINE status, never raised.
    """
    if output is None:
        return FORCED

    try:
        output_mtime = get_mod_time(output)
    except (FileNotFoundError, NotADirectoryError):
        return FILE_MISSING
    except OSError as exc:
        logger.debug(f"Cannot read modification time of {output}: {exc}")
        return cannot_determine(exc)

    try:
        data_mtime = get_mod_time(data)
        template_mtime = get_mod_time(template)
    except OSError as exc:
        logger.debug(f"Cannot read input modification times: {exc}")
        return cannot_determine(exc)

    if output_mtime < template_mtime or output_mtime < data_mtime:
        return OUT_OF_DATE
    return UP_TO_DATE
