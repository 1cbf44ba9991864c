"""
Shared model base.

Attributes are snake_case in Python; the wire and backup form keeps the
camelCase keys the stored documents were written with.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model accepting and emitting camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_document(self) -> dict:
        """Dump to the JSON-compatible stored form."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
