"""
String-keyed persistent stores behind the catalog.

A backend holds raw text under string keys, the same contract as a browser's
localStorage: get_item returns None for a missing key, set_item replaces the
whole value and remove_item ignores missing keys. Three implementations:
- MemoryBackend: a dict, lost when the process exits
- FileBackend: a JSON state file on disk
- CouchbaseBackend: one raw string document per key in a Couchbase collection
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional, Protocol

from couchbase.collection import Collection
from couchbase.exceptions import DocumentNotFoundException
from couchbase.options import GetOptions, UpsertOptions
from couchbase.transcoder import RawStringTranscoder

from utils.config import validate_storage_settings
from store.errors import ParseFailure
from utils.connection import connect_to_collection, connect_to_couchbase_cluster
from utils.constants import MCP_SERVER_NAME

logger = logging.getLogger(f"{MCP_SERVER_NAME}.store.backends")


class KeyValueBackend(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def close(self) -> None: ...

    def describe(self) -> dict[str, Any]: ...


class MemoryBackend:
    """Process-local backend, mostly useful for tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def close(self) -> None:
        pass

    def describe(self) -> dict[str, Any]:
        return {"storage": "memory", "keys": sorted(self._items)}


class FileBackend:
    """Backend persisted as a JSON object mapping each key to its raw text."""

    def __init__(self, path: str | Path):
        self._path: Path = Path(path).expanduser()
        self._items: dict[str, str] = {}

        # Create state directory if it doesn't exist
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._load_state()

    @property
    def path(self) -> Path:
        return self._path

    def _load_state(self) -> None:
        """Load items from the state file. A missing file starts empty."""
        if not self._path.exists():
            logger.debug(f"No state file found at {self._path}, starting empty")
            return
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load state from {self._path}: {e}")
            return

        if not isinstance(data, dict):
            logger.error(f"State file {self._path} does not hold a JSON object, ignoring it")
            return
        self._items = {key: value for key, value in data.items() if isinstance(value, str)}
        logger.info(f"State loaded from {self._path}")

    def _save_state(self, items: dict[str, str]) -> None:
        """Write items to a temporary file and move it over the state file."""
        json_string = json.dumps(items, indent=2, ensure_ascii=False)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(json_string)
            os.replace(tmp_path, self._path)
        except OSError as e:
            logger.error(f"Failed to save state to {self._path}: {e}")
            tmp_path.unlink(missing_ok=True)
            raise
        self._items = items
        logger.debug(f"State saved to {self._path}")

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._save_state({**self._items, key: value})

    def remove_item(self, key: str) -> None:
        if key in self._items:
            self._save_state({k: v for k, v in self._items.items() if k != key})

    def close(self) -> None:
        pass

    def describe(self) -> dict[str, Any]:
        return {"storage": "file", "path": str(self._path), "keys": sorted(self._items)}


class CouchbaseBackend:
    """Backend storing each key as a raw string document in a Couchbase collection."""

    def __init__(self, collection: Collection, cluster: Any = None):
        self._collection = collection
        self._cluster = cluster
        self._transcoder = RawStringTranscoder()

    def get_item(self, key: str) -> Optional[str]:
        """Return the raw text stored under key, or None when there is no document.

        Raises ParseFailure when the document exists but is not a raw string,
        for example a JSON document written with the default transcoder.
        """
        try:
            result = self._collection.get(key, GetOptions(transcoder=self._transcoder))
        except DocumentNotFoundException:
            return None
        except ValueError as e:
            logger.warning(f"Document {key} is not stored as raw text: {e}")
            raise ParseFailure(f"Document {key} could not be decoded: {e}") from e
        except Exception as e:
            logger.error(f"Error getting document {key}: {e}")
            raise
        return result.value

    def set_item(self, key: str, value: str) -> None:
        try:
            self._collection.upsert(key, value, UpsertOptions(transcoder=self._transcoder))
            logger.debug(f"Successfully upserted document {key}")
        except Exception as e:
            logger.error(f"Error upserting document {key}: {e}")
            raise

    def remove_item(self, key: str) -> None:
        try:
            self._collection.remove(key)
            logger.debug(f"Successfully deleted document {key}")
        except DocumentNotFoundException:
            pass
        except Exception as e:
            logger.error(f"Error deleting document {key}: {e}")
            raise

    def close(self) -> None:
        if self._cluster is not None:
            self._cluster.close()
            self._cluster = None

    def describe(self) -> dict[str, Any]:
        return {
            "storage": "couchbase",
            "collection": getattr(self._collection, "name", None),
            "connected": self._cluster is not None,
        }


def open_couchbase_backend(settings: dict[str, Any]) -> CouchbaseBackend:
    """Connect to the configured cluster and return a backend on its collection."""
    cluster = connect_to_couchbase_cluster(
        settings["connection_string"],
        settings["username"],
        settings["password"],
        settings.get("ca_cert_path"),
    )
    try:
        collection = connect_to_collection(
            cluster,
            settings["bucket_name"],
            settings["scope_name"],
            settings["collection_name"],
        )
    except Exception:
        cluster.close()
        raise
    return CouchbaseBackend(collection, cluster=cluster)


def open_backend(settings: dict[str, Any]) -> KeyValueBackend:
    """Build the backend selected by the settings.

    Raises ValueError if the settings are incomplete for the chosen backend.
    """
    validate_storage_settings(settings)
    storage = settings["storage"]
    logger.info(f"Opening {storage} storage backend")
    if storage == "memory":
        return MemoryBackend()
    if storage == "file":
        return FileBackend(settings["storage_path"])
    return open_couchbase_backend(settings)
