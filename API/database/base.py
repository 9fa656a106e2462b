"""
Declarative base and the columns every table shares.

Timestamps are naive UTC. Rows that belong to a restaurant inherit
RestaurantBaseModel and get an indexed restaurant_id that cascades on delete.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, DateTime, ForeignKey
from sqlalchemy.orm import declarative_base, declared_attr

Base = declarative_base()


def get_utc_now():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimestampMixin:
    created_at = Column(DateTime, default=get_utc_now, nullable=False)
    updated_at = Column(DateTime, default=get_utc_now, onupdate=get_utc_now, nullable=False)


class RestaurantMixin:
    """Owning restaurant. Queries are scoped through services.base.RestaurantServiceBase."""

    @declared_attr
    def restaurant_id(cls):
        return Column(
            Integer,
            ForeignKey('restaurants.id', ondelete='CASCADE'),
            nullable=False,
            index=True
        )


class _RecordMixin(TimestampMixin):
    id = Column(Integer, primary_key=True, autoincrement=True)

    # Extra attributes shown by __repr__
    _repr_fields = ()

    def __repr__(self):
        shown = ", ".join(f"{name}={getattr(self, name)!r}" for name in ("id",) + self._repr_fields)
        return f"<{self.__class__.__name__}({shown})>"


class BaseModel(Base, _RecordMixin):
    """Tables that are not owned by a restaurant (the restaurants table itself)."""

    __abstract__ = True


class RestaurantBaseModel(Base, _RecordMixin, RestaurantMixin):
    """Tables owned by one restaurant."""

    __abstract__ = True

    _repr_fields = ("restaurant_id",)
