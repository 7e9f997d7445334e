"""Shared API schema base."""

from typing import Annotated, Any, TypeVar
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from academy.core.exceptions import BadRequestError


def _canonical_uuid(value: str) -> str:
    try:
        return str(UUID(value))
    except ValueError as e:
        raise ValueError("must be a valid UUID") from e


# Entity reference sent by clients, stored in UUID(as_uuid=False) columns
UUIDStr = Annotated[str, AfterValidator(_canonical_uuid)]


class CamelModel(BaseModel):
    """
    Schema base using camelCase on the wire.

    Input accepts either camelCase or snake_case keys; output is camelCase.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def wire_dict(self) -> dict:
        """camelCase dict of the fields, as sent by the client."""
        return self.model_dump(by_alias=True)

    def sent_wire_dict(self) -> dict:
        """camelCase dict of only the fields the client actually sent."""
        return self.model_dump(by_alias=True, exclude_unset=True)

    def changes(self, exclude: set[str] | None = None) -> dict[str, Any]:
        """snake_case dict of the fields the client sent, for partial updates."""
        return self.model_dump(exclude_unset=True, exclude=exclude)


SchemaT = TypeVar("SchemaT", bound=BaseModel)


def parse_payload(schema: type[SchemaT], data: dict[str, Any]) -> SchemaT:
    """
    Validate a manually read body (e.g. multipart form fields).

    Raises:
        BadRequestError: Listing each invalid field
    """
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'body'}: {error['msg']}"
            for error in e.errors()
        )
        raise BadRequestError(f"Invalid request data: {problems}", error_code="INVALID_DATA") from e
