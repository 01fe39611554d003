"""Unified error type for everything tplgen can report to a user."""

from __future__ import annotations

import json
from enum import Enum
from typing import Iterable, Union

import typer
from jinja2 import TemplateError, TemplateNotFound, TemplateSyntaxError
from pydantic import ValidationError


class ErrorKind(str, Enum):
    """Closed set of failure kinds wrapped by TemplateGenError."""

    IO = "io"
    RENDER = "render"
    PARSE = "parse"
    TEMPLATE_COMPILE = "template_compile"
    CLI = "cli"
    MISSING = "missing"


class Missing:
    """Every absent required input of a spec, in report order."""

    __slots__ = ("_messages",)

    def __init__(self, messages: Iterable[str]) -> None:
        self._messages = tuple(messages)

    @property
    def messages(self) -> tuple[str, ...]:
        return self._messages

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self):
        return iter(self._messages)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Missing):
            return NotImplemented
        return self._messages == other._messages

    def __hash__(self) -> int:
        return hash(self._messages)

    def __repr__(self) -> str:
        return f"Missing({list(self._messages)!r})"

    def __str__(self) -> str:
        return "".join(f"missing file: {msg}\n" for msg in self._messages)


Source = Union[BaseException, Missing]

# ClickException of the click that typer raises from; typer may vendor its own.
_CLICK_EXCEPTION: type = next(
    cls for cls in typer.BadParameter.__mro__ if cls.__name__ == "ClickException"
)

# First match wins, so subclasses come before their bases.
_KIND_BY_TYPE: tuple[tuple[type, ErrorKind], ...] = (
    (Missing, ErrorKind.MISSING),
    (TemplateSyntaxError, ErrorKind.TEMPLATE_COMPILE),
    (TemplateNotFound, ErrorKind.IO),
    (TemplateError, ErrorKind.RENDER),
    (json.JSONDecodeError, ErrorKind.PARSE),
    (UnicodeDecodeError, ErrorKind.PARSE),
    (ValidationError, ErrorKind.PARSE),
    (_CLICK_EXCEPTION, ErrorKind.CLI),
    (OSError, ErrorKind.IO),
)


class TemplateGenError(Exception):
    """A reportable failure of one of the kinds in ErrorKind.

    The message is the wrapped source's own message, unchanged.
    """

    def __init__(self, kind: ErrorKind, source: Source) -> None:
        super().__init__(source)
        self.kind = kind
        self.source = source

    def __str__(self) -> str:
        return str(self.source)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.value}, {self.source!r})"

    @classmethod
    def wrap(cls, exc: Source) -> TemplateGenError:
        """Wrap a library failure, picking its kind from the exception type."""
        if isinstance(exc, TemplateGenError):
            return exc
        for exc_type, kind in _KIND_BY_TYPE:
            if isinstance(exc, exc_type):
                if kind is ErrorKind.MISSING:
                    return MissingFilesError(exc)
                return cls(kind, exc)
        raise TypeError(f"Cannot wrap {type(exc).__name__} as a TemplateGenError")


class MissingFilesError(TemplateGenError):
    """Raised when one or more required input files are absent."""

    def __init__(self, missing: Missing | Iterable[str]) -> None:
        if not isinstance(missing, Missing):
            missing = Missing(missing)
        super().__init__(ErrorKind.MISSING, missing)

    @property
    def missing(self) -> Missing:
        return self.source  # type: ignore[return-value]
