"""Human-readable rendering of storage locations.

Platform directory descriptors (tree URIs such as
``content://com.android.externalstorage.documents/tree/primary%3ADownload``)
are turned into short labels like ``Internal storage/Download``.  Anything
not recognised is shown as best-effort decoded text, never as a raw opaque
identifier.
"""

from pathlib import Path
from urllib.parse import unquote, urlparse

VOLUME_ALIASES = {
    "primary": "Internal storage",
    "home": "Home folder",
}

EXTERNAL_PREFIX = "Selected folder: "
INTERNAL_PREFIX = "App folder: "
TEMPORARY_PREFIX = "Temporary location: "


def _describe_file_uri(directory_uri: str) -> str | None:
    path = Path(unquote(urlparse(directory_uri).path))
    try:
        relative = path.relative_to(Path.home())
    except ValueError:
        return str(path)
    rel = relative.as_posix()
    label = VOLUME_ALIASES["home"]
    return f"{label}/{rel}" if rel and rel != "." else label


def describe_directory(directory_uri: str | None) -> str | None:
    """Render a directory descriptor as a short user-facing label.

    Returns ``None`` when nothing meaningful can be derived.
    """
    if not directory_uri:
        return None
    if directory_uri.startswith("file://"):
        return _describe_file_uri(directory_uri)

    descriptor = directory_uri
    tree_index = descriptor.find("/tree/")
    if tree_index >= 0:
        descriptor = descriptor[tree_index + len("/tree/"):]
    document_index = descriptor.find("/document/")
    if document_index >= 0:
        descriptor = descriptor[:document_index]

    decoded = unquote(descriptor)
    if not decoded:
        return None

    volume, sep, rest = decoded.partition(":")
    if sep:
        rest = rest.replace(":", "/")
        label = VOLUME_ALIASES.get(volume, volume)
        return f"{label}/{rest}" if rest else label
    return decoded


def _join(base: str, file_name: str | None) -> str:
    name = (file_name or "").lstrip("/")
    base = base.rstrip("/")
    return f"{base}/{name}" if name else base


def external_display_path(directory_uri: str | None, file_name: str | None) -> str | None:
    """Display path for a file written into a granted external directory."""
    label = describe_directory(directory_uri)
    if label:
        return EXTERNAL_PREFIX + _join(label, file_name)
    if directory_uri:
        return EXTERNAL_PREFIX + _join(directory_uri, file_name)
    return None


def internal_display_path(documents_dir: Path | None, file_name: str | None) -> str:
    """Display path for a file copied into the app's private directory."""
    if documents_dir is not None:
        return INTERNAL_PREFIX + _join(documents_dir.as_posix(), file_name)
    return "App folder"


def temporary_display_path(uri: str | None) -> str | None:
    return TEMPORARY_PREFIX + uri if uri else None
