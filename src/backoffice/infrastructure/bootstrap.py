"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from pathlib import Path

from backoffice.infrastructure.persistence.json_store import JsonStore
from backoffice.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork
from backoffice.infrastructure.settings import Settings


def load_settings(data_dir: Path | None = None) -> Settings:
    """Settings from the environment, with an optional data directory override."""
    if data_dir is None:
        return Settings()
    return Settings(data_dir=data_dir)


def unit_of_work(settings: Settings) -> JsonUnitOfWork:
    return JsonUnitOfWork(JsonStore(settings.data_dir))
