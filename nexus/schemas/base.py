"""
Base schema with UTC datetime serialization and camelCase field names.

Provides UTCDatetime type annotation that serializes datetime
objects with Z suffix indicating UTC timezone, and ApiModel, the base for
every request and response body.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Annotated, Any, TypeVar

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from nexus.core.errors import ValidationError, format_validation_errors

# Custom datetime type that serializes with Z suffix for UTC
# Usage: created_at: UTCDatetime instead of created_at: datetime
UTCDatetime = Annotated[
    datetime,
    PlainSerializer(
        lambda dt: dt.strftime("%Y-%m-%dT%H:%M:%SZ") if dt else None,
        return_type=str,
    ),
]


class ApiModel(BaseModel):
    """
    Wire bodies use camelCase (imageUrl, isNsfw); snake_case is accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_payload(model: type[ModelT], data: ModelT | Mapping[str, Any]) -> ModelT:
    """
    Accept an already-validated schema instance or validate a raw mapping.

    Raises:
        ValidationError: the mapping violates the schema's constraints
    """
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(errors=format_validation_errors(e.errors())) from e
