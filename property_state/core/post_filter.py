"""Translate listing query parameters into storage predicates.

``PostFilterBuilder.build`` reads the recognised keys from a query mapping
and returns a ``PostFilter``. The filter is a plain value object so it can
be inspected in isolation; ``PostFilter.clauses`` renders it into SQLAlchemy
conditions against the ``Post`` table.

Recognised keys:

    city       case-insensitive substring match
    type       exact match
    property   exact match
    bedroom    at least this many bedrooms
    minPrice   price lower bound, inclusive
    maxPrice   price upper bound, inclusive

Anything else in the mapping is ignored. Empty values count as absent.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from sqlalchemy import func

from models.models import Post

from .normalizer import to_int


class FilterParseError(ValueError):
    def __init__(self, key: str, value: str):
        self.key = key
        self.value = value
        super().__init__(f"Query parameter {key!r} must be a number, got {value!r}")


@dataclass(frozen=True)
class PostFilter:
    city: Optional[str] = None
    post_type: Optional[str] = None
    property_type: Optional[str] = None
    min_bedroom: Optional[int] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.city,
                self.post_type,
                self.property_type,
                self.min_bedroom,
                self.min_price,
                self.max_price,
            )
        )

    def clauses(self) -> list:
        conditions = []
        if self.city is not None:
            conditions.append(
                func.lower(Post.city).contains(self.city.lower(), autoescape=True)
            )
        if self.post_type is not None:
            conditions.append(Post.type == self.post_type)
        if self.property_type is not None:
            conditions.append(Post.property == self.property_type)
        if self.min_bedroom is not None:
            conditions.append(Post.bedroom >= self.min_bedroom)
        if self.min_price is not None:
            conditions.append(Post.price >= self.min_price)
        if self.max_price is not None:
            conditions.append(Post.price <= self.max_price)
        return conditions


class PostFilterBuilder:
    TEXT_KEYS = {"city": "city", "type": "post_type", "property": "property_type"}
    NUMERIC_KEYS = {
        "bedroom": "min_bedroom",
        "minPrice": "min_price",
        "maxPrice": "max_price",
    }

    def build(self, query: Mapping[str, str]) -> PostFilter:
        values = {}
        for key, field in self.TEXT_KEYS.items():
            raw = self._present(query, key)
            if raw is not None:
                values[field] = raw

        for key, field in self.NUMERIC_KEYS.items():
            raw = self._present(query, key)
            if raw is None:
                continue
            try:
                values[field] = to_int(raw)
            except ValueError:
                raise FilterParseError(key, raw)

        return PostFilter(**values)

    @staticmethod
    def _present(query: Mapping[str, str], key: str) -> Optional[str]:
        raw = query.get(key)
        if raw is None:
            return None
        raw = str(raw)
        return raw if raw.strip() else None
