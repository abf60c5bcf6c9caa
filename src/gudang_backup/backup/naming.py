"""File naming for generated files: ``<slug>_<YYYYMMDD-HHMMSS>``."""

import re
from datetime import datetime

BACKUP_BASE_NAME = "gudang-backup"

_UNSAFE = re.compile(r"[^a-zA-Z0-9_-]")


def slugify(base_name: str | None) -> str:
    """Replace every character outside ``[a-zA-Z0-9_-]`` with ``-``."""
    return _UNSAFE.sub("-", base_name or "export")


def build_timestamped_file_base(base_name: str | None, when: datetime | None = None) -> str:
    """Return ``<slug>_<YYYYMMDD-HHMMSS>`` using local wall-clock time.

    Example:
        >>> build_timestamped_file_base("gudang-backup", datetime(2026, 1, 2, 3, 4, 5))
        'gudang-backup_20260102-030405'
    """
    when = when or datetime.now()
    return f"{slugify(base_name)}_{when:%Y%m%d-%H%M%S}"
