"""Persisted directory preference.

Caches the last externally granted write location so the user is not
re-prompted on every export.  The preference is stored as a small JSON
file ``{"directoryUri": "..."}``.  Read problems mean "no preference";
write problems are logged and swallowed since the preference is only a
convenience.
"""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class _PreferenceRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    directory_uri: str = Field(alias="directoryUri", min_length=1)


class DirectoryPreference:
    """File-backed cache of the granted external directory."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> str | None:
        """Return the cached directory URI, or ``None``."""
        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError:
            return None
        if not content.strip():
            return None
        try:
            record = _PreferenceRecord.model_validate_json(content)
        except ValidationError:
            logger.warning("Ignoring unreadable directory preference at %s", self.path)
            return None
        return record.directory_uri

    def save(self, directory_uri: str) -> None:
        """Cache ``directory_uri``."""
        record = _PreferenceRecord(directory_uri=directory_uri)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(record.model_dump(by_alias=True)), encoding="utf-8"
            )
        except OSError as e:
            logger.warning("Could not save directory preference: %s", e)

    def clear(self) -> None:
        """Forget the cached directory (idempotent)."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not clear directory preference: %s", e)
