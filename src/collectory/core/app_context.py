#!/usr/bin/env python3
"""
Purpose:
    The process-level bundle the CLI works against: effective configuration
    plus the schema registry built from its `schema_paths`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from collectory.core.config import load_config
from collectory.core.log import configure_logging
from collectory.core.schema.registry import SchemaRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppContext:
    config: Dict[str, Any]
    schemas: SchemaRegistry

    @property
    def schema_roots(self) -> List[Path]:
        return self.schemas.roots

    def registry_for(self, roots: Optional[Iterable[Path]] = None) -> SchemaRegistry:
        """
        The shared registry, or a freshly loaded one when `roots` are given.

        A one-off registry leaves the shared one untouched, so a single CLI
        run can point at other schema directories.
        """
        roots = [Path(r) for r in roots or []]
        if not roots:
            return self.schemas
        registry = SchemaRegistry(roots)
        registry.load(clear=True)
        return registry


def build_context(config: Optional[Dict[str, Any]] = None, *, preload: bool = True) -> AppContext:
    """
    Create an `AppContext` from `config` (default: `load_config()`).

    Logging is configured first so registry warnings use the configured
    handler. With `preload`, schema files are scanned immediately.
    """
    cfg = config if config is not None else load_config()
    configure_logging(cfg)

    registry = SchemaRegistry(Path(p) for p in cfg.get("schema_paths", []))
    if preload:
        registry.load(clear=True)
        logger.debug("Context ready: %d schema(s) from %s", len(registry.names()), registry.roots)
    return AppContext(config=cfg, schemas=registry)
