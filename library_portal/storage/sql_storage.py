import logging
from functools import wraps
from typing import Optional

from sqlalchemy import and_, create_engine, delete, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from library_portal import models as md
from library_portal.exceptions import DuplicateRecordError, StorageError
from library_portal.storage.base import RECORD_SCHEMAS, UNIQUE_FIELDS, Storage
from sql import CREATE_POSTGRES, CREATE_SQLITE

logger = logging.getLogger(__name__)

MODELS = {
    model.__tablename__: model
    for model in (
        md.User,
        md.Profile,
        md.UserRole,
        md.ContactMessage,
        md.BookBorrow,
        md.LibraryCardApplication,
        md.Donation,
        md.Note,
        md.RareBook,
    )
}


def atomic_transaction(func):
    """
    Decorator to run a storage method in one transaction.
    Commits on success, rolls back on any error, and always releases the
    thread's session so the next call reads fresh rows.
    """

    @wraps(func)
    def wrapper(self, collection, *args, **kwargs):
        session = self.session
        try:
            result = func(self, collection, *args, **kwargs)
            session.commit()
            return result
        except IntegrityError as e:
            session.rollback()
            raise DuplicateRecordError(collection, _unique_field(collection, e)) from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.exception("Storage operation %s on %s failed", func.__name__, collection)
            raise StorageError(f"Could not {func.__name__} {collection}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            self.session.remove()

    return wrapper


def _unique_field(collection, error):
    message = str(error.orig)
    for field in UNIQUE_FIELDS.get(collection, ()):
        if field in message:
            return field
    return None


class SqlStorage(Storage):
    """Keeps each collection in its own table; every call commits before returning."""

    def __init__(self, uri, echo=False):
        options = {"echo": echo}
        if uri in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, otherwise each session sees its own empty database
            options.update(poolclass=StaticPool, connect_args={"check_same_thread": False})
        self.engine = create_engine(uri, **options)
        self.session = scoped_session(sessionmaker(bind=self.engine, expire_on_commit=False))

    def init(self):
        ddl = CREATE_POSTGRES if self.engine.dialect.name == "postgresql" else CREATE_SQLITE
        try:
            with self.engine.begin() as connection:
                for stmt in ddl.split(";"):
                    if stmt.strip():
                        connection.execute(text(stmt))
        except SQLAlchemyError as e:
            logger.exception("Could not create library tables")
            raise StorageError("Could not create library tables") from e

    def close(self):
        self.session.remove()
        self.engine.dispose()

    def to_record(self, collection, row):
        return RECORD_SCHEMAS[collection].model_validate(row).model_dump(mode="json")

    @atomic_transaction
    def all(self, collection):
        model = MODELS[collection]
        rows = self.session.scalars(select(model).order_by(model.created_at)).all()
        return [self.to_record(collection, row) for row in rows]

    @atomic_transaction
    def get(self, collection, record_id) -> Optional[dict]:
        row = self.session.get(MODELS[collection], record_id)
        return self.to_record(collection, row) if row is not None else None

    @atomic_transaction
    def find(self, collection, **criteria):
        model = MODELS[collection]
        stmt = select(model).order_by(model.created_at)
        if criteria:
            stmt = stmt.where(and_(*(getattr(model, k) == v for k, v in criteria.items())))
        return [self.to_record(collection, row) for row in self.session.scalars(stmt).all()]

    @atomic_transaction
    def create(self, collection, data):
        record = self.new_record(collection, data)
        row = MODELS[collection](**record.model_dump())
        self.session.add(row)
        self.session.flush()
        logger.debug("Created %s record %s", collection, record.id)
        return record.model_dump(mode="json")

    @atomic_transaction
    def update(self, collection, record_id, changes):
        row = self.session.get(MODELS[collection], record_id)
        if row is None:
            return None
        current = self.to_record(collection, row)
        record = self.merged_record(collection, current, changes)
        for key, value in record.model_dump().items():
            setattr(row, key, value)
        self.session.flush()
        return record.model_dump(mode="json")

    @atomic_transaction
    def delete(self, collection, record_id):
        model = MODELS[collection]
        self.session.execute(delete(model).where(model.id == record_id))
