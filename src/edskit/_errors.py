"""Exceptions raised while generating or parsing .eds archives.

Every exception raised by edskit derives from `EDSError` and carries a `kind`,
so callers can tell an incomplete experiment apart from a corrupt file or a
broken template without matching on messages.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Any, ClassVar

__all__ = [
    "AnchorNotFound",
    "DetachedNode",
    "EDSArchiveError",
    "EDSError",
    "EDSSemanticError",
    "EDSValidationError",
    "ErrorKind",
    "ExperimentIncomplete",
    "FieldNotFound",
    "InvalidColumn",
    "InvalidWellName",
    "InvalidWellRow",
    "MissingArchiveMember",
    "MissingBarcode",
    "MissingRequiredField",
    "MissingRunState",
    "RegionNotFound",
    "RowOutOfRange",
    "TemplateIntegrityError",
]


class ErrorKind(Enum):
    validation = auto()
    """Bad caller input: well names, required run fields."""
    template = auto()
    """A template document does not have the structure edskit edits."""
    io = auto()
    """An archive could not be read, or is missing an expected member."""
    semantic = auto()
    """The archive is readable but does not describe a usable, finished run."""


class EDSError(Exception):
    """Base class for all edskit errors."""

    kind: ClassVar[ErrorKind]

    def __init__(self, msg: str, **ctx: Any) -> None:
        super().__init__(msg)
        self.ctx = ctx


# ------------------------------------------------------------------------------
# validation
# ------------------------------------------------------------------------------


class EDSValidationError(EDSError, ValueError):
    kind = ErrorKind.validation


class InvalidWellRow(EDSValidationError):
    pass


class RowOutOfRange(EDSValidationError):
    pass


class InvalidWellName(EDSValidationError):
    pass


class InvalidColumn(EDSValidationError):
    pass


class MissingRequiredField(EDSValidationError):
    pass


# ------------------------------------------------------------------------------
# template integrity
# ------------------------------------------------------------------------------


class TemplateIntegrityError(EDSError):
    """A template document is missing a node that edskit needs to edit."""

    kind = ErrorKind.template


class DetachedNode(TemplateIntegrityError):
    pass


class RegionNotFound(TemplateIntegrityError):
    pass


class FieldNotFound(TemplateIntegrityError):
    pass


class AnchorNotFound(TemplateIntegrityError, IndexError):
    pass


# ------------------------------------------------------------------------------
# archive / io
# ------------------------------------------------------------------------------


class EDSArchiveError(EDSError):
    kind = ErrorKind.io


class MissingArchiveMember(EDSArchiveError, KeyError):
    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


# ------------------------------------------------------------------------------
# semantic
# ------------------------------------------------------------------------------


class EDSSemanticError(EDSError):
    kind = ErrorKind.semantic


class MissingBarcode(EDSSemanticError):
    pass


class MissingRunState(EDSSemanticError):
    pass


class ExperimentIncomplete(EDSSemanticError):
    pass
