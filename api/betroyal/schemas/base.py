from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Schema base that reads and writes camelCase JSON (snake_case also accepted)."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
