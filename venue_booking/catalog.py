"""Venue and table-type catalog: plain CRUD with existence checks."""

import logging
from decimal import Decimal, InvalidOperation

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from .auth import require_admin
from .errors import ConflictError, NotFoundError, ValidationError, translate_integrity_error
from .lifecycle import as_record
from .models import TableType, Venue
from .validation import PASSED, check_positive_int, check_required, ensure, is_blank, parse_identifier

logger = logging.getLogger(__name__)


def _string_list(value, field):
    if value is None:
        return []
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return value
    raise ValidationError(f"{field} must be a list of strings")


class CatalogResource:
    model = None
    label = "Record"

    def __init__(self, session) -> None:
        self._session = session

    def ordering(self) -> tuple:
        return (self.model.created_at.desc(), self.model.id.desc())

    def values(self, data: dict) -> dict:
        raise NotImplementedError

    def _load(self, entity_id):
        row_id = parse_identifier(entity_id)
        entity = self._session.get(self.model, row_id) if row_id is not None else None
        if entity is None:
            raise NotFoundError(f"{self.label} not found")
        return entity

    def _commit(self) -> None:
        try:
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            raise translate_integrity_error(
                exc,
                on_foreign_key=ConflictError(f"{self.label} is still referenced by existing bookings"),
            ) from exc

    def list(self):
        return list(self._session.execute(select(self.model).order_by(*self.ordering())).scalars())

    def get(self, entity_id):
        return self._load(entity_id)

    def create(self, admin, data):
        require_admin(admin)
        entity = self.model(**self.values(as_record(data)))
        self._session.add(entity)
        self._commit()
        logger.info("%s %s added", self.label, entity.id)
        return entity

    def update(self, admin, entity_id, data):
        require_admin(admin)
        values = self.values(as_record(data))
        entity = self._load(entity_id)
        for column, value in values.items():
            setattr(entity, column, value)
        self._commit()
        return entity

    def delete(self, admin, entity_id) -> None:
        require_admin(admin)
        entity = self._load(entity_id)
        self._session.delete(entity)
        self._commit()
        logger.info("%s %s deleted", self.label, entity_id)


class VenueCatalog(CatalogResource):
    model = Venue
    label = "Venue"

    def values(self, data):
        capacity = data.get("capacity")
        ensure(
            check_required(data, ("name",)),
            PASSED if is_blank(capacity) else check_positive_int(capacity, "capacity"),
        )
        return {
            "name": str(data["name"]).strip(),
            "location": data.get("location"),
            "description": data.get("description"),
            "capacity": None if is_blank(capacity) else int(capacity),
            "amenities": _string_list(data.get("amenities"), "amenities"),
            "price_range": data.get("price_range"),
            "images": _string_list(data.get("images"), "images"),
        }


class TableTypeCatalog(CatalogResource):
    model = TableType
    label = "Table type"

    def ordering(self):
        return (TableType.capacity.asc(), TableType.id.asc())

    def values(self, data):
        capacity = data.get("capacity")
        ensure(
            check_required(data, ("name",)),
            PASSED if is_blank(capacity) else check_positive_int(capacity, "capacity"),
        )
        price = data.get("price")
        if not is_blank(price):
            try:
                price = Decimal(str(price))
            except InvalidOperation:
                raise ValidationError("price must be a number") from None
            if not price.is_finite() or price < 0:
                raise ValidationError("price must be a non-negative number")
        return {
            "name": str(data["name"]).strip(),
            "description": data.get("description"),
            "capacity": None if is_blank(capacity) else int(capacity),
            "price": None if is_blank(price) else price,
        }
