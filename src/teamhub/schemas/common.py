"""Shared schema base.

The frontend speaks camelCase (`userId`, `linkedinUrl`); Python speaks
snake_case. CamelModel maps between them and accepts either on input.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Largest value a 64-bit INTEGER primary key can hold.
MAX_ID = 2**63 - 1

# An id supplied in a request body. Out-of-range ids fail
# validation instead of reaching the driver.
RecordId = Annotated[int, Field(ge=1, le=MAX_ID)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Message(CamelModel):
    message: str
