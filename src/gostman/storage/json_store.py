"""
Gostman JSON Request Store

Keeps the environment text and the saved request definitions in one JSON
document. Every mutation is a whole-document read-modify-write performed under
the write side of a reader/writer lock and committed by atomic file replace.
"""

import json
import os
import tempfile
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..core.config import get_store_path
from ..core.exceptions import NotFoundError, StorageError, ValidationError
from ..core.jsontext import load_string_map
from ..core.logging import get_logger
from ..core.models import RequestDefinition, SavedDocument
from .locks import lock_for

logger = get_logger(__name__)

EMPTY_ENVIRONMENT = "{}"

# On-disk request field -> model field
_REQUEST_FIELDS = {
    "id": "id",
    "name": "name",
    "url": "url",
    "method": "method",
    "headers": "headers",
    "body": "body",
    "queryParams": "query_params",
    "response": "response",
}


def document_from_data(data: Any) -> SavedDocument:
    """
    Build a SavedDocument from decoded JSON, keeping whatever is usable.

    Fields of the wrong type fall back to their defaults; request entries that
    are not objects are skipped.
    """
    if not isinstance(data, dict):
        logger.warning("Backing document is not a JSON object; ignoring its contents")
        return SavedDocument()

    variables = data.get("variables", "")
    if not isinstance(variables, str):
        logger.warning("Ignoring non-string 'variables' field in backing document")
        variables = ""

    raw_requests = data.get("requests") or []
    if not isinstance(raw_requests, list):
        logger.warning("Ignoring non-list 'requests' field in backing document")
        raw_requests = []

    requests: List[RequestDefinition] = []
    for position, entry in enumerate(raw_requests):
        if not isinstance(entry, dict):
            logger.warning(f"Skipping malformed request entry at position {position}")
            continue
        fields = {
            model_field: entry[disk_field]
            for disk_field, model_field in _REQUEST_FIELDS.items()
            if isinstance(entry.get(disk_field), str)
        }
        requests.append(RequestDefinition(**fields))

    return SavedDocument(variables=variables, requests=requests)


class JSONRequestStore:
    """
    JSON-backed store for environment variables and saved request definitions.

    Provides:
    - Lazy per-operation loading (no cache between calls)
    - Atomic whole-file replacement on every write
    - Reader/writer serialization shared by all stores on the same file
    - Tolerant loading, except where a mutation needs an existing entry
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        """
        Initialize the store.

        Args:
            path: Backing file path (uses config if None)
        """
        self.path = Path(path) if path else get_store_path()
        self._lock = lock_for(self.path)

    def load(self) -> SavedDocument:
        """
        Load the saved document.

        Returns:
            The stored document, or an empty one if the file is absent,
            unreadable, empty or not valid JSON
        """
        with self._lock.read_locked():
            return self._load_tolerant()

    def list_requests(self) -> List[RequestDefinition]:
        """List saved request definitions in insertion order."""
        return self.load().requests

    def get_request(self, request_id: str) -> RequestDefinition:
        """
        Get a saved request definition by id.

        Raises:
            NotFoundError: If no request has the given id
        """
        document = self.load()
        index = document.find_index(request_id)
        if index == -1:
            raise NotFoundError(f"id not found: {request_id}")
        return document.requests[index]

    def save_request(self, definition: RequestDefinition) -> RequestDefinition:
        """
        Save a request definition.

        An empty id is replaced by a fresh UUID and the request appended; an id
        matching a saved request overwrites it in place; an unknown id is
        appended as-is.

        Args:
            definition: Definition to save (never modified)

        Returns:
            The stored copy, carrying its id

        Raises:
            StorageError: If the backing file cannot be written
        """
        with self._lock.write_locked():
            document = self._load_tolerant()

            if definition.id:
                stored = definition.model_copy()
            else:
                stored = definition.model_copy(update={"id": str(uuid.uuid4())})

            index = document.find_index(stored.id) if definition.id else -1
            if index == -1:
                document.requests.append(stored)
                logger.info(f"Saved new request {stored.id}")
            else:
                document.requests[index] = stored
                logger.info(f"Updated request {stored.id}")

            self._write(document)
            return stored.model_copy()

    def delete_request(self, request_id: str) -> None:
        """
        Delete a saved request definition.

        Raises:
            NotFoundError: If no request has the given id; nothing is written
            StorageError: If the backing file cannot be read or written
        """
        with self._lock.write_locked():
            document = self._load(strict=True)

            index = document.find_index(request_id)
            if index == -1:
                raise NotFoundError(f"id not found: {request_id}")

            del document.requests[index]
            self._write(document)
            logger.info(f"Deleted request {request_id}")

    def save_response(self, request_id: str, response: str) -> None:
        """
        Record the last response body on a saved request.

        Only the response field changes; the rest of the entry is taken from
        the file as it is now, not from the copy that was sent.

        Raises:
            NotFoundError: If no request has the given id; nothing is written
            StorageError: If the backing file cannot be read or written
        """
        with self._lock.write_locked():
            document = self._load(strict=True)

            index = document.find_index(request_id)
            if index == -1:
                raise NotFoundError(f"id not found: {request_id}")

            document.requests[index].response = response
            self._write(document)
            logger.debug(f"Stored response for request {request_id}")

    def get_environment_text(self) -> str:
        """Stored environment text, or '{}' if it was never set."""
        return self.load().variables or EMPTY_ENVIRONMENT

    def save_environment_text(self, text: str) -> None:
        """
        Replace the environment text.

        Raises:
            ValidationError: If text is not a JSON object of string values;
                nothing is written
            StorageError: If the backing file cannot be written
        """
        try:
            load_string_map(text)
        except (TypeError, ValueError) as e:
            raise ValidationError("Error: Invalid JSON structure", {"error": str(e)})

        with self._lock.write_locked():
            document = self._load_tolerant()
            document.variables = text
            self._write(document)
            logger.info("Saved environment variables")

    def store(self, document: SavedDocument) -> None:
        """
        Replace the backing file with document.

        Raises:
            StorageError: If the file cannot be written
        """
        with self._lock.write_locked():
            self._write(document)

    def _load_tolerant(self) -> SavedDocument:
        """Like ``_load`` but an unusable file reads as an empty document."""
        try:
            return self._load(strict=False)
        except StorageError as e:
            logger.warning(f"Falling back to an empty document: {e.message}")
            return SavedDocument()

    def _load(self, strict: bool) -> SavedDocument:
        """
        Read and decode the backing file. Caller must hold the lock.

        Raises:
            StorageError: If the file exists but cannot be read, or (strict
                only) is not valid JSON
        """
        if not self.path.exists():
            return SavedDocument()

        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"failed to read file: {e}", {"path": str(self.path)})

        if not text.strip():
            return SavedDocument()

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            if strict:
                raise StorageError(
                    f"failed to parse JSON: {e}", {"path": str(self.path)}
                )
            logger.warning(f"Invalid JSON in {self.path}: {e}")
            return SavedDocument()

        return document_from_data(data)

    def _write(self, document: SavedDocument) -> None:
        """Atomically replace the backing file. Caller must hold the write lock."""
        payload: Dict[str, Any] = document.to_document()
        temp_path: Optional[str] = None

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                temp_path = f.name
                json.dump(payload, f, indent=1, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, self.path)
            temp_path = None
        except OSError as e:
            logger.error(f"Failed to write {self.path}: {e}")
            raise StorageError(f"failed to write file: {e}", {"path": str(self.path)})
        finally:
            if temp_path is not None and os.path.exists(temp_path):
                os.unlink(temp_path)
