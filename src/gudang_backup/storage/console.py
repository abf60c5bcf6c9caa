"""Terminal-driven scoped storage.

A ``ScopedStorage`` for hosts without a platform document picker: the
directory "grant" is a prompt on the console, and files are created inside
the granted folder without ever overwriting an existing one.
"""

import asyncio
from pathlib import Path
from urllib.parse import unquote, urlparse

from rich.console import Console
from rich.prompt import Prompt

from gudang_backup.storage.models import DirectoryGrant


def path_from_uri(uri: str) -> Path:
    """Filesystem path of a ``file://`` URI.

    Raises:
        ValueError: For any other scheme.
    """
    parsed = urlparse(uri)
    if parsed.scheme != "file":
        raise ValueError(f"Not a file URI: {uri}")
    return Path(unquote(parsed.path))


def _unique_path(directory: Path, file_name: str) -> Path:
    candidate = directory / file_name
    stem, suffix = candidate.stem, candidate.suffix
    n = 1
    while candidate.exists():
        candidate = directory / f"{stem} ({n}){suffix}"
        n += 1
    return candidate


class ConsoleDirectoryStorage:
    """Scoped storage whose directory picker is a console prompt."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    async def request_directory_permission(self) -> DirectoryGrant:
        answer = await asyncio.to_thread(
            Prompt.ask,
            "Folder to save files in (leave blank to use the app folder)",
            default="",
            console=self.console,
        )
        answer = answer.strip()
        if not answer:
            return DirectoryGrant(granted=False)
        directory = Path(answer).expanduser()
        if not directory.is_dir():
            self.console.print(f"[yellow]Not a folder:[/yellow] {directory}")
            return DirectoryGrant(granted=False)
        return DirectoryGrant(granted=True, directory_uri=directory.resolve().as_uri())

    async def create_file(self, directory_uri: str, file_name: str, mime_type: str) -> str:
        directory = path_from_uri(directory_uri)
        if not directory.is_dir():
            raise FileNotFoundError(f"Granted folder no longer exists: {directory}")
        target = _unique_path(directory, file_name)
        target.touch(exist_ok=False)
        return target.as_uri()

    async def write_bytes(self, uri: str, data: bytes) -> None:
        path_from_uri(uri).write_bytes(data)

    async def read_bytes(self, uri: str) -> bytes:
        return path_from_uri(uri).read_bytes()

    async def delete(self, uri: str) -> None:
        path_from_uri(uri).unlink(missing_ok=True)
