import copy
import json
import logging
import os
import tempfile
import threading
from typing import Optional

from library_portal.exceptions import DuplicateRecordError, StorageError
from library_portal.storage.base import COLLECTIONS, UNIQUE_FIELDS, Storage

logger = logging.getLogger(__name__)


class JsonStorage(Storage):
    """
    Keeps every collection in one JSON document.

    The whole document is loaded at `init()`. Each write builds the next
    version of the document, writes it to a temporary file beside the data
    file, fsyncs it and renames it into place; only then does the in-memory
    copy move forward. A failed write therefore changes nothing.
    """

    def __init__(self, path):
        self.path = path
        self._data = {name: [] for name in COLLECTIONS}
        self._lock = threading.RLock()

    def init(self):
        directory = os.path.dirname(os.path.abspath(self.path))
        with self._lock:
            try:
                os.makedirs(directory, exist_ok=True)
                if not os.path.exists(self.path):
                    logger.info("Creating library data file at %s", self.path)
                    self._flush(self._data)
                    return
                with open(self.path, "r", encoding="utf-8") as f:
                    loaded = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.exception("Could not load library data file %s", self.path)
                raise StorageError(f"Could not load {self.path}") from e

            if not isinstance(loaded, dict):
                raise StorageError(f"{self.path} does not hold a JSON object")
            # collections added after the file was written start out empty
            self._data = {name: list(loaded.get(name) or []) for name in COLLECTIONS}

    def all(self, collection):
        with self._lock:
            return copy.deepcopy(self._data[collection])

    def get(self, collection, record_id) -> Optional[dict]:
        with self._lock:
            index = self._index_of(collection, record_id)
            if index is None:
                return None
            return copy.deepcopy(self._data[collection][index])

    def find(self, collection, **criteria):
        with self._lock:
            return [
                copy.deepcopy(record)
                for record in self._data[collection]
                if all(record.get(k) == v for k, v in criteria.items())
            ]

    def create(self, collection, data):
        with self._lock:
            record = self.new_record(collection, data).model_dump(mode="json")
            rows = self._data[collection]
            self._check_unique(collection, record, rows)
            self._commit(collection, rows + [record])
            logger.debug("Created %s record %s", collection, record["id"])
            return copy.deepcopy(record)

    def update(self, collection, record_id, changes):
        with self._lock:
            index = self._index_of(collection, record_id)
            if index is None:
                return None
            rows = self._data[collection]
            record = self.merged_record(collection, rows[index], changes).model_dump(mode="json")
            self._check_unique(collection, record, rows[:index] + rows[index + 1 :])
            self._commit(collection, rows[:index] + [record] + rows[index + 1 :])
            return copy.deepcopy(record)

    def delete(self, collection, record_id):
        with self._lock:
            rows = self._data[collection]
            remaining = [record for record in rows if record["id"] != record_id]
            if len(remaining) == len(rows):
                return
            self._commit(collection, remaining)

    def _index_of(self, collection, record_id):
        for index, record in enumerate(self._data[collection]):
            if record["id"] == record_id:
                return index
        return None

    def _check_unique(self, collection, record, others):
        for field in UNIQUE_FIELDS.get(collection, ()):
            value = record.get(field)
            if value is not None and any(other.get(field) == value for other in others):
                raise DuplicateRecordError(collection, field)

    def _commit(self, collection, rows):
        data = dict(self._data)
        data[collection] = rows
        self._flush(data)
        self._data = data

    def _flush(self, data):
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, tmp_path = tempfile.mkstemp(prefix=".data-", suffix=".json", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.exception("Could not write library data file %s", self.path)
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageError(f"Could not write {self.path}") from e
