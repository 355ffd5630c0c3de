from typing import Annotated

from pydantic import BaseModel, BeforeValidator
from pydantic.alias_generators import to_camel


def _as_str_id(value):
    # El backend a veces manda IDs numéricos y a veces UUID en texto
    if value is None or isinstance(value, str):
        return value
    return str(value)


EntityId = Annotated[str, BeforeValidator(_as_str_id)]


class CamelModel(BaseModel):
    """
    Base para todo lo que viaja hacia/desde el backend de la tienda.
    El backend usa camelCase (salePrice, customerId...); aceptamos también snake_case.
    """

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
