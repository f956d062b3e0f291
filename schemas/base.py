"""
Base classes for request schemas.

Payloads arrive in camelCase from the dashboard; snake_case field names are
accepted as well so scripts can post either form.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseInputSchema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )
