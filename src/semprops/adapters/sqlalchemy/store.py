"""Property store backed by SQLAlchemy tables."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from semprops.domain.errors import EntityNotFoundError, StoreError
from semprops.domain.model import FactSet, PropertyDeclaration, PropertyType

from .codec import PayloadError, decode_value, encode_item
from .mappings import edit_table, fact_table, page_table, property_table, utcnow

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session

    from semprops.domain.model import Entity, Value

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EditRecord:
    revision: int
    comment: str | None
    created_at: datetime


class SqlAlchemyPropertyStore:
    """Persist each fact set as ordered rows, replaced whole on every write.

    A write deletes the page's fact rows, inserts the new snapshot, bumps the
    page revision and logs the edit comment in one transaction.
    """

    def __init__(self, engine: Engine, *, default_type_id: str | None = None) -> None:
        self.engine = engine
        self.default_type_id = default_type_id
        self._sessions = sessionmaker(bind=engine, expire_on_commit=False)

    # Registry ------------------------------------------------------------------

    def describe(self, key: str) -> PropertyDeclaration | None:
        stmt = select(property_table).where(property_table.c.key == key)
        try:
            with self._sessions() as session:
                row = session.execute(stmt).mappings().first()
        except SQLAlchemyError as exc:
            raise StoreError("Failed to read property declaration", cause=str(exc)) from exc
        if row is None:
            if self.default_type_id is not None:
                return PropertyDeclaration(key=key, type_id=self.default_type_id)
            return None
        return PropertyDeclaration(
            key=row["key"],
            type_id=row["type_id"],
            label=row["label"],
            user_defined=row["user_defined"],
            fields=row["fields"],
        )

    def declare_property(
        self,
        key: str,
        type_id: str = PropertyType.TEXT,
        *,
        label: str | None = None,
        user_defined: bool = True,
        fields: Iterable[str] = (),
    ) -> PropertyDeclaration:
        declaration = PropertyDeclaration(
            key=key,
            type_id=type_id,
            label=label,
            user_defined=user_defined,
            fields=tuple(fields),
        )
        values = {
            "type_id": declaration.type_id,
            "label": declaration.label,
            "user_defined": declaration.user_defined,
            "fields": declaration.fields,
        }
        try:
            with self._sessions.begin() as session:
                exists = session.execute(
                    select(property_table.c.key).where(property_table.c.key == key)
                ).first()
                if exists is None:
                    session.execute(insert(property_table).values(key=key, **values))
                else:
                    session.execute(
                        update(property_table).where(property_table.c.key == key).values(**values)
                    )
        except SQLAlchemyError as exc:
            raise StoreError("Failed to declare property", cause=str(exc)) from exc
        log.info("Declared property %s as %s", key, type_id)
        return declaration

    # Pages ---------------------------------------------------------------------

    def create_page(self, entity: Entity) -> bool:
        try:
            with self._sessions.begin() as session:
                if self._page_id(session, entity) is not None:
                    return False
                session.execute(insert(page_table).values(title=entity.identifier))
        except SQLAlchemyError as exc:
            raise StoreError("Failed to create page", cause=str(exc)) from exc
        log.info("Created page %s", entity)
        return True

    def page_exists(self, title: str) -> bool:
        stmt = select(page_table.c.id).where(page_table.c.title == title)
        try:
            with self._sessions() as session:
                return session.execute(stmt).first() is not None
        except SQLAlchemyError as exc:
            raise StoreError("Failed to read page", cause=str(exc)) from exc

    def edits(self, entity: Entity) -> list[EditRecord]:
        stmt = (
            select(edit_table.c.revision, edit_table.c.comment, edit_table.c.created_at)
            .join(page_table, page_table.c.id == edit_table.c.page_id)
            .where(page_table.c.title == entity.identifier)
            .order_by(edit_table.c.revision)
        )
        try:
            with self._sessions() as session:
                rows = session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise StoreError("Failed to read page history", cause=str(exc)) from exc
        return [
            EditRecord(revision=row.revision, comment=row.comment, created_at=row.created_at)
            for row in rows
        ]

    # Facts ---------------------------------------------------------------------

    def read(self, entity: Entity) -> FactSet:
        try:
            with self._sessions() as session:
                page_id = self._require_page(session, entity)
                rows = session.execute(
                    select(fact_table.c.property_key, fact_table.c.type_id, fact_table.c.payload)
                    .where(fact_table.c.page_id == page_id)
                    .order_by(fact_table.c.position)
                ).all()
        except SQLAlchemyError as exc:
            raise StoreError("Failed to read page", cause=str(exc)) from exc

        pairs: list[tuple[str, tuple[Value, ...]]] = []
        for row in rows:
            try:
                value = decode_value(row.type_id, row.payload)
            except PayloadError as exc:
                raise StoreError(
                    f"Corrupt stored value for property {row.property_key!r}", cause=str(exc)
                ) from exc
            pairs.append((row.property_key, (value,)))
        return FactSet(pairs)

    def write(self, entity: Entity, facts: FactSet, *, comment: str | None = None) -> None:
        rows = [
            {
                "position": position,
                "property_key": key,
                "type_id": value.type_id,
                "payload": encode_item(value.item),
            }
            for position, (key, value) in enumerate(
                (key, value) for key, values in facts.items() for value in values
            )
        ]
        try:
            with self._sessions.begin() as session:
                page_id = self._require_page(session, entity)
                session.execute(delete(fact_table).where(fact_table.c.page_id == page_id))
                if rows:
                    session.execute(
                        insert(fact_table), [{"page_id": page_id, **row} for row in rows]
                    )
                session.execute(
                    update(page_table)
                    .where(page_table.c.id == page_id)
                    .values(revision=page_table.c.revision + 1, updated_at=utcnow())
                )
                revision = session.execute(
                    select(page_table.c.revision).where(page_table.c.id == page_id)
                ).scalar_one()
                session.execute(
                    insert(edit_table).values(page_id=page_id, revision=revision, comment=comment)
                )
        except SQLAlchemyError as exc:
            raise StoreError("Failed to save page", cause=str(exc)) from exc
        log.debug("Wrote revision %s of %s with %s facts", revision, entity, len(rows))

    @staticmethod
    def _page_id(session: Session, entity: Entity) -> int | None:
        return session.execute(
            select(page_table.c.id).where(page_table.c.title == entity.identifier)
        ).scalar_one_or_none()

    def _require_page(self, session: Session, entity: Entity) -> int:
        page_id = self._page_id(session, entity)
        if page_id is None:
            raise EntityNotFoundError()
        return page_id
