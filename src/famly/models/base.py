"""Shared base for view models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ViewModel(BaseModel):
    """Frozen model whose serialized (view) shape uses camelCase field names."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_view(self) -> dict:
        """Return the camelCase, JSON-compatible view shape."""

        return self.model_dump(mode="json", by_alias=True)


__all__ = ["ViewModel"]
