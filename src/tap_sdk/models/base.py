"""Pydantic base for the typed fragments of API payloads."""
from __future__ import annotations

from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

M = TypeVar("M", bound="TapModel")


class TapModel(BaseModel):
    """Immutable model that ignores keys it does not know about."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    @classmethod
    def parse_fragment(cls: Type[M], data: Any) -> Optional[M]:
        """Validate ``data``, or return None when it does not fit the model."""
        if not isinstance(data, dict):
            return None
        try:
            return cls.model_validate(data)
        except ValidationError:
            return None

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary, leaving out unset fields."""
        return self.model_dump(mode="json", exclude_none=True)
