"""Base class for request payload validation."""

from typing import ClassVar, Tuple

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """
    JSON payloads use camelCase keys; Python code sees snake_case attributes.

    Update payloads list their NOT NULL columns in ``non_nullable`` so an
    explicit ``null`` is rejected while an omitted key just means "unchanged".
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    non_nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _reject_nulls(self):
        for name in self.non_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} may not be null")
        return self

    def patch(self) -> dict:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)
