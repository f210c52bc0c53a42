# giftpool/db/base_class.py
import uuid

from sqlalchemy.orm import as_declarative, declared_attr


def new_id() -> str:
    return str(uuid.uuid4())


@as_declarative()
class Base:
    # default table name: lower-cased class name (models override with plurals)
    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower()
