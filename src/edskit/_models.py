"""Models for the run description (generation input) and parse output."""

from __future__ import annotations

import warnings
from collections.abc import Mapping
from typing import Annotated, Any, Literal, TypeAlias

from annotated_types import MinLen
from pydantic import BeforeValidator, Field, model_validator
from typing_extensions import Self

from edskit._base import _BaseModel
from edskit._errors import MissingRequiredField

__all__ = [
    "NamedSample",
    "NegativeControl",
    "ParseResult",
    "PlateMetadata",
    "PositiveControl",
    "RunDescription",
    "SampleSpec",
    "render_sample",
]

NTC_LABEL = "NTC"
NTC_COLOR = "-8076815"
POS_LABEL = "POS"
POS_COLOR = "-5701666"
SAMPLE_COLOR = "-2105970"

DEFAULT_PLATE_NAME = "Unnamed plate"
DEFAULT_PLATE_DESCRIPTION = "Generated by edskit"
DEFAULT_EXPERIMENT_NAME = "Unnamed experiment"
DEFAULT_OPERATOR = "Unknown operator"

# ------------------------------------------------------------------------------
# Sample specs
# ------------------------------------------------------------------------------


class NamedSample(_BaseModel):
    """A well holding a named sample."""

    kind: Literal["named"] = "named"
    name: str = Field(description="Free-text sample name shown in the instrument UI")


class NegativeControl(_BaseModel):
    """A no-template control well."""

    kind: Literal["ntc"] = "ntc"


class PositiveControl(_BaseModel):
    kind: Literal["pos"] = "pos"


def _coerce_sample(value: Any) -> Any:
    # True/False are the shorthand for positive/negative controls
    if value is False:
        return NegativeControl()
    if value is True:
        return PositiveControl()
    if isinstance(value, str):
        return NamedSample(name=value)
    return value


SampleSpec: TypeAlias = Annotated[
    NamedSample | NegativeControl | PositiveControl,
    Field(discriminator="kind"),
    BeforeValidator(_coerce_sample),
]


def render_sample(
    spec: NamedSample | NegativeControl | PositiveControl,
) -> tuple[str, str]:
    """Return the (label, color) pair written to the documents for a sample.

    >>> render_sample(NegativeControl())
    ('NTC', '-8076815')
    """
    if isinstance(spec, NegativeControl):
        return NTC_LABEL, NTC_COLOR
    if isinstance(spec, PositiveControl):
        return POS_LABEL, POS_COLOR
    return spec.name, SAMPLE_COLOR


# ------------------------------------------------------------------------------
# Run description
# ------------------------------------------------------------------------------


class RunDescription(_BaseModel):
    """Everything needed to generate an .eds archive for one plate run.

    Examples
    --------
    >>> run = RunDescription(
    ...     barcode="1337",
    ...     name="Some experiment",
    ...     wells={"A1": "a001", "H12": False, "H11": True},
    ... )
    >>> run.wells["H12"]
    NegativeControl(kind='ntc')
    """

    barcode: Annotated[str, MinLen(1)] = Field(description="The plate barcode")
    name: str | None = Field(
        default=None, description="Plate and experiment name shown by the instrument"
    )
    operator: str | None = Field(default=None, description="Operator of the run")
    description: str | None = Field(default=None, description="Plate description")
    wells: dict[str, SampleSpec] = Field(
        description=(
            "Mapping of well name (e.g. 'A1') to its sample.  Iteration order is "
            "preserved in the generated plate setup and analysis protocol."
        )
    )

    @classmethod
    def coerce(cls, obj: RunDescription | Mapping[str, Any]) -> RunDescription:
        """Return `obj` as a validated RunDescription.

        Raises
        ------
        MissingRequiredField
            If `obj` is a mapping without a barcode or without wells.
        """
        if isinstance(obj, RunDescription):
            return obj
        missing = [] if obj.get("barcode") else ["barcode"]
        if obj.get("wells") is None:
            missing.append("wells")
        if missing:
            raise MissingRequiredField(
                "barcode and wells are required in order to generate a plate setup",
                missing=missing,
            )
        return cls.model_validate(obj)

    @model_validator(mode="after")
    def _warn_duplicate_wells(self) -> Self:
        seen: dict[str, str] = {}
        for well in self.wells:
            key = well.strip().upper()
            if key in seen:
                warnings.warn(
                    f"Wells {seen[key]!r} and {well!r} refer to the same position; "
                    "both will be written to the plate setup.",
                    UserWarning,
                    stacklevel=2,
                )
            seen[key] = well
        return self

    @property
    def plate_name(self) -> str:
        return self.name or DEFAULT_PLATE_NAME

    @property
    def plate_description(self) -> str:
        return self.description or DEFAULT_PLATE_DESCRIPTION

    @property
    def experiment_name(self) -> str:
        return self.name or DEFAULT_EXPERIMENT_NAME

    @property
    def operator_name(self) -> str:
        return self.operator or DEFAULT_OPERATOR


# ------------------------------------------------------------------------------
# Parse output
# ------------------------------------------------------------------------------


class PlateMetadata(_BaseModel):
    barcode: str = Field(description="The plate barcode")
    plate_name: str | None = Field(default=None, alias="plateName")
    plate_description: str | None = Field(default=None, alias="plateDescription")
    operator_name: str | None = Field(default=None, alias="operatorName")


ResultRow: TypeAlias = dict[str, str | None]
"""One row of the analysis result table, keyed by column header."""

MultiComponentSeries: TypeAlias = dict[str, dict[str, dict[int, str | None]]]
"""well name -> dye name -> cycle number -> fluorescence value."""


class ParseResult(_BaseModel):
    """Everything read from a completed .eds archive."""

    metadata: PlateMetadata
    results: list[ResultRow] = Field(default_factory=list)
    wells: MultiComponentSeries = Field(default_factory=dict)
