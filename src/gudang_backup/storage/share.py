"""Shareable URI resolution.

The external sharing system needs a directly readable file.  Files stored
through a permission-scoped API are not, so their bytes are copied into a
fresh cache file first.
"""

import logging
from pathlib import Path

from gudang_backup.storage.strategies import ScopedStorage

logger = logging.getLogger(__name__)


def _direct_uri(candidate: str) -> str | None:
    if candidate.startswith("file://"):
        return candidate
    if candidate.startswith("/"):
        return Path(candidate).as_uri()
    return None


class ShareableUriResolver:
    """Turns stored-file candidates into a URI the share sheet can read.

    Args:
        cache_dir: Where share copies are materialised.
        scoped_storage: Reader for non-direct URIs; without one only direct
            candidates can be shared.
        fallback_dir: Used when ``cache_dir`` is ``None``.
    """

    def __init__(
        self,
        cache_dir: Path | None,
        scoped_storage: ScopedStorage | None = None,
        fallback_dir: Path | None = None,
    ) -> None:
        self.cache_dir = cache_dir
        self.scoped_storage = scoped_storage
        self.fallback_dir = fallback_dir

    async def resolve(self, file_name: str, *candidates: str | None) -> str | None:
        """Return a directly shareable URI for the first usable candidate.

        Direct (filesystem) candidates win without copying.  Otherwise each
        non-direct candidate is read through the scoped API and rewritten
        as ``<cache_dir>/<file_name>``.  ``None`` means sharing is
        unavailable, which is not an error.
        """
        usable = [c for c in candidates if isinstance(c, str) and c]

        for candidate in usable:
            direct = _direct_uri(candidate)
            if direct is not None:
                return direct

        if self.scoped_storage is None:
            return None
        root = self.cache_dir or self.fallback_dir
        if root is None:
            return None

        for candidate in usable:
            try:
                data = await self.scoped_storage.read_bytes(candidate)
                root.mkdir(parents=True, exist_ok=True)
                share_path = root / file_name
                share_path.write_bytes(data)
            except Exception as e:
                logger.warning("Could not materialise share copy of %s: %s", candidate, e)
                continue
            return share_path.resolve().as_uri()

        return None
