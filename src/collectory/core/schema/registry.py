#!/usr/bin/env python3
"""
Purpose:
    Implements the SchemaRegistry for Collectory, which discovers, loads,
    deduplicates, and caches collection schema files from given roots,
    providing query access to them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from collectory.core.constants import SUPPORTED_SCHEMA_EXT
from collectory.core.schema.schema_file import SchemaFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaEntry:
    """
    Lightweight record for a schema file discovered on disk.
    - name: schema name (lowercase if valid; otherwise derived from filename stem)
    - path: absolute path to the JSON file
    - valid: whether this is the selected, usable schema
    - reason: diagnostic text for invalid entries (parse error, duplicate dropped, etc.)
    - field_count: number of fields in the compiled schema (valid entries only)
    """
    name: str
    path: Path
    valid: bool
    reason: Optional[str] = None
    field_count: Optional[int] = None


class SchemaRegistry:
    """
    Loads and caches `SchemaFile` objects from one or more roots and exposes
    entries (valid + invalid) for UX.

    Duplicate policy: newest mtime wins; older duplicates are marked invalid.
    """

    def __init__(self, roots: Iterable[Path]):
        self._roots = [Path(r) for r in roots]
        self._schemas: Dict[str, SchemaFile] = {}             # valid winners by name (lowercase)
        self._entries: List[SchemaEntry] = []                 # all scanned results (valid + invalid)
        self._loaded: bool = False

    # --- Loading --- #

    def load(self, *, clear: bool = True) -> None:
        """
        Scan roots for schema files, parse, and apply duplicate resolution.

        Args:
            clear: if True, clears prior state before loading.
        """
        if clear:
            self._clear_state()

        candidates: dict[str, list[tuple[Path, SchemaFile]]] = {}

        for p in self._iter_schema_files():
            schema, err = self._parse_schema_file(p)
            if err:
                logger.warning("Skipping invalid schema file %s: %s", p, err.splitlines()[0])
                self._record_invalid_entry(p, err)
                continue
            candidates.setdefault(schema.name, []).append((p.resolve(), schema))

        self._resolve_duplicates(candidates)
        self._loaded = True
        logger.debug("Loaded %d schema(s) from %d root(s)", len(self._schemas), len(self._roots))

    # --- Query API --- #

    def get(self, name: str) -> Optional[SchemaFile]:
        """Return loaded (valid) schema by name (case-insensitive), or None."""
        return self._schemas.get(name.strip().lower())

    def require(self, name: str) -> SchemaFile:
        """Return loaded schema by name or raise LookupError if not found/invalid."""
        s = self.get(name)
        if not s:
            raise LookupError(f"Schema {name!r} not found")
        return s

    def names(self) -> list[str]:
        """Sorted names of valid schemas."""
        return sorted(self._schemas.keys())

    def entries(self) -> List[SchemaEntry]:
        """All scanned entries (valid + invalid)."""
        return list(self._entries)

    def valid_entries(self) -> List[SchemaEntry]:
        return [e for e in self._entries if e.valid]

    def invalid_entries(self) -> List[SchemaEntry]:
        return [e for e in self._entries if not e.valid]

    @property
    def loaded(self) -> bool:
        """True if a load() has completed."""
        return self._loaded

    @property
    def roots(self) -> List[Path]:
        return list(self._roots)

    # --- Loading Helpers --- #

    def _clear_state(self) -> None:
        self._schemas.clear()
        self._entries.clear()

    def _iter_schema_files(self):
        for root in self._roots:
            if not root.exists():
                continue
            for p in sorted(root.rglob("*")):
                if p.is_file() and p.suffix.lower() in SUPPORTED_SCHEMA_EXT:
                    yield p

    def _parse_schema_file(self, path: Path) -> tuple[SchemaFile | None, str | None]:
        try:
            return SchemaFile.from_file(path), None
        except (OSError, ValueError) as e:
            # pydantic.ValidationError and json.JSONDecodeError are ValueErrors
            return None, str(e)

    def _record_invalid_entry(self, path: Path, reason: str) -> None:
        self._entries.append(
            SchemaEntry(name=path.stem.lower(), path=path.resolve(), valid=False, reason=reason)
        )

    def _resolve_duplicates(self, candidates: dict[str, list[tuple[Path, SchemaFile]]]) -> None:
        for name, items in candidates.items():
            # newest mtime wins; tie-break by path for stability
            items.sort(key=lambda t: (t[0].stat().st_mtime, str(t[0])), reverse=True)
            (win_path, winner), losers = items[0], items[1:]
            self._schemas[name] = winner
            self._entries.append(
                SchemaEntry(
                    name=name,
                    path=win_path,
                    valid=True,
                    reason="kept",
                    field_count=len(winner.metadata_schema),
                )
            )
            for loser_path, _ in losers:
                logger.warning("Dropping duplicate schema %r at %s (kept %s)", name, loser_path, win_path)
                self._entries.append(
                    SchemaEntry(name=name, path=loser_path, valid=False, reason="duplicate-dropped")
                )
