from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Wire models use camelCase on the HTTP surface and snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
