"""ORM nexus. Declarative base for table definitions used by Alembic."""

from __future__ import annotations

import importlib
import logging
import os
import pkgutil
from pathlib import Path

from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base mold."""
    pass


def discover_feature_models() -> int:
    """Sweep ``app.features.*.models`` so every table lands on ``Base.metadata``."""
    if os.getenv("SKIP_MODEL_DISCOVERY", "false").lower() == "true":
        logger.info("Skip sweep (env flag).")
        return 0

    features_dir = Path(__file__).resolve().parent.parent / "features"
    if not features_dir.is_dir():
        logger.warning("No features dir: %s", features_dir)
        return 0

    discovered = 0
    for pkg in pkgutil.walk_packages([str(features_dir)], prefix="app.features."):
        if not pkg.name.endswith(".models"):
            continue
        importlib.import_module(pkg.name)
        discovered += 1
    logger.debug("Discovered %d model modules", discovered)
    return discovered


def list_models():
    """List model names."""
    return [cls.__name__ for cls in Base.registry._class_registry.values() if hasattr(cls, "__table__")]


__all__ = ["Base", "discover_feature_models", "list_models"]
