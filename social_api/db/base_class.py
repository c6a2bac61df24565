# social_api/db/base_class.py
import uuid
from typing import Any

from sqlalchemy.orm import as_declarative, declared_attr


def new_id() -> str:
    return str(uuid.uuid4())


@as_declarative()
class Base:
    id: Any
    __name__: str

    # Table name defaults to the lower-cased class name
    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower()
