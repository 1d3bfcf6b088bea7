"""JSON file storage for whole-collection persistence."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from bankomat.exceptions import SerializationError, StorageError
from bankomat.logging import get_logger

logger = get_logger(__name__)


class JsonFileStorage:
    """Read and write JSON arrays as named files in one directory.

    Every write replaces the whole file. The new content goes to a
    temporary file in the same directory which is then renamed over the
    target, so readers see either the old or the new collection.
    """

    def __init__(self, directory: str | Path, pretty: bool = True) -> None:
        """Initialize JSON file storage.

        Parameters
        ----------
        directory : str | Path
            Directory holding the collection files.
        pretty : bool
            Pretty-print JSON output.
        """
        self.directory = Path(directory)
        self.pretty = pretty

    def ensure_directory(self) -> None:
        """Create the storage directory if it does not exist."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot create data directory {self.directory}: {exc}") from exc

    def path_for(self, name: str) -> Path:
        return self.directory / f"{name}.json"

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def read_collection(self, name: str) -> list[dict[str, Any]]:
        """Read a collection file.

        Raises
        ------
        SerializationError
            If the file is unreadable, not valid JSON or not an array of objects.
        """
        file_path = self.path_for(name)
        try:
            with open(file_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise SerializationError(f"Cannot read {file_path}: {exc}") from exc

        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            raise SerializationError(f"{file_path} does not contain an array of records")
        return data

    def write_collection(self, name: str, records: list[dict[str, Any]]) -> None:
        """Atomically replace a collection file.

        Raises
        ------
        StorageError
            If the data cannot be written durably.
        """
        file_path = self.path_for(name)
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{name}.", suffix=".tmp", dir=self.directory
            )
        except OSError as exc:
            raise StorageError(f"Cannot write {file_path}: {exc}") from exc

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                if self.pretty:
                    json.dump(records, f, indent=2, ensure_ascii=False)
                else:
                    json.dump(records, f, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, file_path)
        except OSError as exc:
            _discard(tmp_name)
            raise StorageError(f"Cannot write {file_path}: {exc}") from exc

        logger.debug("Wrote %d records to %s", len(records), file_path)


def _discard(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError:
        logger.warning("Could not remove temporary file %s", path)
