from decimal import Decimal
from typing import Annotated
from pydantic import BaseModel, BeforeValidator, PlainSerializer
from pydantic.alias_generators import to_camel

# Money is kept as Decimal internally and sent to clients as a JSON number
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def _id_to_str(value):
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


# Product ids arrive as JSON numbers from the catalog and as strings from older carts
ProductRef = Annotated[str, BeforeValidator(_id_to_str)]


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_items: int
    has_next_page: bool
    has_prev_page: bool


def paginate(total: int, page: int, limit: int) -> Pagination:
    total_pages = (total + limit - 1) // limit
    return Pagination(
        current_page=page,
        total_pages=total_pages,
        total_items=total,
        has_next_page=page * limit < total,
        has_prev_page=page > 1,
    )


class MessageResponse(BaseModel):
    message: str
