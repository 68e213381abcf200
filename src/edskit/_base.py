from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict

__all__ = ["_BaseModel"]


class _BaseModel(BaseModel):
    """Shared model configuration.

    Fields accept both their python name and their alias on input, and dump under
    the alias (``plateName``), which is the key edskit's JSON output uses.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(
        extra="ignore",
        validate_assignment=True,
        validate_default=True,
        validate_by_name=True,
        validate_by_alias=True,
        serialize_by_alias=True,
    )
