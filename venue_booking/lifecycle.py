"""Lifecycle of an entity whose state is a status drawn from a fixed set.

Bookings and venue requests share the same shape: public creation with the
status forced to its initial value, administrator listing, lookup, status
changes, full replacement, deletion and per-status counts. Subclasses supply
the model, the allowed statuses, the payload rules and any referential
pre-checks.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from .auth import require_admin
from .errors import NotFoundError, translate_integrity_error
from .validation import check_choice, check_required, ensure, parse_identifier

logger = logging.getLogger(__name__)


def as_record(data) -> dict:
    return data if isinstance(data, dict) else {}


class StatusLifecycle:
    model = None
    label = "Record"
    statuses: tuple[str, ...] = ()
    initial_status = "pending"
    required_fields: tuple[str, ...] = ()
    total_key = "total"

    def __init__(self, session) -> None:
        self._session = session

    # -- hooks -------------------------------------------------------------

    def validate(self, data: dict) -> None:
        """Raise ValidationError if ``data`` is not an acceptable payload."""
        ensure(check_required(data, self.required_fields))

    def check_references(self, data: dict) -> None:
        """Existence pre-checks for rows the payload refers to."""

    def values(self, data: dict) -> dict:
        """Column values taken from an already validated payload."""
        raise NotImplementedError

    def integrity_references(self, data: dict) -> dict:
        """Errors to report when a named foreign key is rejected by the store."""
        return {}

    def filters(self, params: dict) -> list:
        """Extra WHERE clauses for ``list`` beyond the status filter."""
        return []

    def status_ordering(self) -> tuple:
        return self.newest_first()

    # -- helpers -----------------------------------------------------------

    def newest_first(self) -> tuple:
        return (self.model.created_at.desc(), self.model.id.desc())

    def not_found(self) -> NotFoundError:
        return NotFoundError(f"{self.label} not found")

    def check_status(self, status) -> None:
        ensure(check_choice(status, self.statuses))

    def _load(self, entity_id):
        row_id = parse_identifier(entity_id)
        entity = self._session.get(self.model, row_id) if row_id is not None else None
        if entity is None:
            raise self.not_found()
        return entity

    def _select(self, *clauses, order_by=None):
        statement = select(self.model).where(*clauses).order_by(*(order_by or self.newest_first()))
        return list(self._session.execute(statement).unique().scalars().all())

    def _commit(self, references=None) -> None:
        try:
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            raise translate_integrity_error(exc, references=references) from exc

    # -- operations --------------------------------------------------------

    def create(self, data):
        """Insert a new entity; any client-supplied status is ignored."""
        data = as_record(data)
        self.validate(data)
        self.check_references(data)

        entity = self.model(**self.values(data), status=self.initial_status)
        self._session.add(entity)
        self._commit(self.integrity_references(data))
        logger.info("%s %s created with status %s", self.label, entity.id, entity.status)
        return entity

    def list(self, admin, params=None):
        """All entities matching the optional equality filters, newest first."""
        require_admin(admin)
        params = as_record(params)
        clauses = []
        if params.get("status"):
            self.check_status(params["status"])
            clauses.append(self.model.status == params["status"])
        clauses.extend(self.filters(params))
        return self._select(*clauses)

    def list_by_status(self, admin, status):
        require_admin(admin)
        self.check_status(status)
        return self._select(self.model.status == status, order_by=self.status_ordering())

    def get(self, admin, entity_id):
        require_admin(admin)
        return self._load(entity_id)

    def update_status(self, admin, entity_id, status):
        """Move an entity to any allowed status.

        Returns the updated entity and the status it had before.
        """
        require_admin(admin)
        self.check_status(status)
        entity = self._load(entity_id)

        previous_status = entity.status
        entity.status = status
        self._commit()
        logger.info("%s %s status %s -> %s", self.label, entity_id, previous_status, status)
        return entity, previous_status

    def replace(self, admin, entity_id, data):
        """Overwrite every mutable field; status defaults to the initial status."""
        require_admin(admin)
        data = as_record(data)
        status = data.get("status") or self.initial_status
        self.validate(data)
        self.check_status(status)
        entity = self._load(entity_id)
        self.check_references(data)

        for column, value in self.values(data).items():
            setattr(entity, column, value)
        entity.status = status
        self._commit(self.integrity_references(data))
        logger.info("%s %s replaced", self.label, entity_id)
        return entity

    def delete(self, admin, entity_id) -> dict:
        """Hard delete. Returns a snapshot of the row as it was."""
        require_admin(admin)
        entity = self._load(entity_id)
        snapshot = entity.to_dict(with_references=True)

        self._session.delete(entity)
        self._commit()
        logger.info("%s %s deleted", self.label, entity_id)
        return snapshot

    def statistics(self, admin) -> dict:
        """Per-status counts and a grand total, computed at query time."""
        require_admin(admin)
        rows = self._session.execute(
            select(self.model.status, func.count(self.model.id)).group_by(self.model.status)
        ).all()
        counts = dict.fromkeys(self.statuses, 0)
        counts.update({status: count for status, count in rows})

        stats = {f"{status}_count": counts[status] for status in self.statuses}
        stats[self.total_key] = sum(count for _, count in rows)
        return stats
