"""Generate and parse qPCR run archives (.eds) for 96-well plates."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("edskit")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "uninstalled"

from ._errors import (
    AnchorNotFound,
    DetachedNode,
    EDSArchiveError,
    EDSError,
    EDSSemanticError,
    EDSValidationError,
    ErrorKind,
    ExperimentIncomplete,
    FieldNotFound,
    InvalidColumn,
    InvalidWellName,
    InvalidWellRow,
    MissingArchiveMember,
    MissingBarcode,
    MissingRequiredField,
    MissingRunState,
    RegionNotFound,
    RowOutOfRange,
    TemplateIntegrityError,
)
from ._models import (
    NamedSample,
    NegativeControl,
    ParseResult,
    PlateMetadata,
    PositiveControl,
    RunDescription,
    SampleSpec,
    render_sample,
)
from ._template import EDSTemplate, TemplateDocument, TemplateSchema
from ._wells import (
    DEFAULT_GRID,
    PlateGrid,
    well_index_to_name,
    well_row_to_letter,
    well_row_to_number,
    well_to_index,
)
from .read import parse
from .write import generate, write_eds

__all__ = [
    "DEFAULT_GRID",
    "AnchorNotFound",
    "DetachedNode",
    "EDSArchiveError",
    "EDSError",
    "EDSSemanticError",
    "EDSTemplate",
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
    "NamedSample",
    "NegativeControl",
    "ParseResult",
    "PlateGrid",
    "PlateMetadata",
    "PositiveControl",
    "RegionNotFound",
    "RowOutOfRange",
    "RunDescription",
    "SampleSpec",
    "TemplateDocument",
    "TemplateIntegrityError",
    "TemplateSchema",
    "generate",
    "parse",
    "render_sample",
    "well_index_to_name",
    "well_row_to_letter",
    "well_row_to_number",
    "well_to_index",
    "write_eds",
]
