# giftpool/models/base.py

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from giftpool.db.base_class import Base, new_id  # noqa: F401


class CamelModel(BaseModel):
    """Schemas speak camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
