from typing import Any, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import inspect

T = TypeVar("T", bound=BaseModel)


def unloaded_attributes(item) -> frozenset:
    state = inspect(item, raiseerr=False)
    return frozenset(state.unloaded) if state is not None else frozenset()


class ORMMapper:
    @staticmethod
    def one(item, schema: Type[T], **extra: Any) -> T:
        """Validate an ORM row into ``schema``.

        ``extra`` supplies derived fields the row does not carry itself
        (owner projections, per-viewer counters). They win over row attributes.
        Relationships the query did not load are left to the schema default.
        """
        if not extra:
            return schema.model_validate(item)
        unloaded = unloaded_attributes(item)
        data = {
            name: getattr(item, name)
            for name in schema.model_fields
            if name not in extra and name not in unloaded and hasattr(item, name)
        }
        data.update(extra)
        return schema.model_validate(data, from_attributes=True)
