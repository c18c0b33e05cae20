from pydantic import Field

from schemas import ApiModel


class LookupName(ApiModel):
    name: str = Field(min_length=1, max_length=100)
