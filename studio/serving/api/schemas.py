"""
Shared API Schema Pieces

Bodies travel in camelCase; models accept snake_case too so query rows can
be validated straight from their mappings.
"""

from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

# Money stays Decimal in Python and becomes a JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
OptionalMoney = Optional[Money]


class CamelModel(BaseModel):
    """Base for request and response bodies"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MutationResponse(CamelModel):
    """Acknowledgement returned by writes"""
    success: bool = True
    message: str
