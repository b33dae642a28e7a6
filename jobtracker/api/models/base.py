"""Shared base model for camelCase JSON payloads"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model serialized with camelCase keys; accepts snake_case or camelCase input"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


def reject_null(value):
    """Field validator body for optional update fields backed by NOT NULL columns"""
    if value is None:
        raise ValueError("may be omitted but not null")
    return value
