"""Wiring: build the adapter, storage, and backup service from configuration.

The directory strategy is chosen here once, at startup, instead of being
re-decided on every persist call.

Usage:
    config = load_config()
    app = build_app(config, scoped_storage=ConsoleDirectoryStorage())
    try:
        result = await app.service.export()
    finally:
        await app.adapter.close()
"""

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path

from gudang_backup.adapters.sql import AsyncSqlAdapter
from gudang_backup.backup.exporter import BackupExporter
from gudang_backup.backup.importer import BackupImporter
from gudang_backup.config.models import AppConfig
from gudang_backup.schema.registry import DEFAULT_REGISTRY, SchemaRegistry
from gudang_backup.service import BackupService
from gudang_backup.storage.preference import DirectoryPreference
from gudang_backup.storage.resolver import StorageResolver
from gudang_backup.storage.share import ShareableUriResolver
from gudang_backup.storage.strategies import (
    DirectoryStrategy,
    PlainFilesystemStrategy,
    ScopedDirectoryStrategy,
    ScopedStorage,
)

logger = logging.getLogger(__name__)


@dataclass
class App:
    """Everything a caller needs, built from one ``AppConfig``."""

    config: AppConfig
    adapter: AsyncSqlAdapter
    resolver: StorageResolver
    share_resolver: ShareableUriResolver
    service: BackupService
    preference: DirectoryPreference | None


def build_preference(config: AppConfig) -> DirectoryPreference | None:
    path = config.storage.resolved_preference_file()
    return DirectoryPreference(path) if path is not None else None


def select_strategy(
    config: AppConfig,
    scoped_storage: ScopedStorage | None,
    preference: DirectoryPreference | None,
) -> DirectoryStrategy:
    """Pick the external placement strategy for this host.

    The scoped strategy needs both a scoped API and somewhere to remember
    the grant; otherwise the plain filesystem strategy is used.
    """
    storage = config.storage
    if storage.strategy == "scoped" and scoped_storage is not None and preference is not None:
        logger.debug("Using scoped directory strategy")
        return ScopedDirectoryStrategy(scoped_storage, preference)
    logger.debug("Using plain filesystem strategy (export_dir=%s)", storage.export_dir)
    return PlainFilesystemStrategy(export_dir=storage.export_dir)


def transient_dir(config: AppConfig) -> Path:
    """Staging directory for files on their way to durable storage."""
    if config.storage.cache_dir is not None:
        return config.storage.cache_dir / "staging"
    return Path(tempfile.gettempdir()) / "gudang"


def build_app(
    config: AppConfig,
    scoped_storage: ScopedStorage | None = None,
    registry: SchemaRegistry = DEFAULT_REGISTRY,
) -> App:
    """Build the adapter, storage resolvers, and backup service."""
    adapter = AsyncSqlAdapter(config.database.url)
    preference = build_preference(config)
    strategy = select_strategy(config, scoped_storage, preference)
    resolver = StorageResolver(strategy, documents_dir=config.storage.documents_dir)
    share_resolver = ShareableUriResolver(
        cache_dir=config.storage.cache_dir,
        scoped_storage=scoped_storage,
        fallback_dir=config.storage.documents_dir,
    )
    exporter = BackupExporter(
        adapter,
        resolver,
        registry=registry,
        temp_dir=transient_dir(config),
        base_name=config.backup.base_name,
    )
    importer = BackupImporter(adapter, registry=registry)
    return App(
        config=config,
        adapter=adapter,
        resolver=resolver,
        share_resolver=share_resolver,
        service=BackupService(exporter, importer),
        preference=preference,
    )
