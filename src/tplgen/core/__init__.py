"""Template specs, freshness classification and the unified error type."""

from .errors import ErrorKind, Missing, MissingFilesError, TemplateGenError
from .freshness import OutputStatus, StatusKind, output_status
from .manifest import load_manifest, parse_manifest
from .models import BuildConfig, TemplateSpec

__all__ = [
    "BuildConfig",
    "ErrorKind",
    "Missing",
    "MissingFilesError",
    "OutputStatus",
    "StatusKind",
    "TemplateGenError",
    "TemplateSpec",
    "load_manifest",
    "output_status",
    "parse_manifest",
]
