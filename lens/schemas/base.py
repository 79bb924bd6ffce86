"""Shared base for every record the orchestrators produce.

Records are immutable, use snake_case attributes in Python and camelCase on
the wire (model replies, HTTP bodies, persisted layouts).
"""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from lens.core.exceptions import MalformedResponse


class LensModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    @classmethod
    def decode(cls, data: dict[str, Any], feature: str) -> Self:
        """Validate a normalised model reply into this record.

        Raises:
            MalformedResponse: if the payload violates the record's contract
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise MalformedResponse(feature, f"{e.error_count()} validation error(s): {e.errors()[0]['msg']}") from e
