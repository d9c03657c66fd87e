"""
CSV Loader

Reads the four source files from a data directory:

    Networks.csv   id,name
    Profiles.csv   id,name,bio
    Posts.csv      id,author,networkId,content
    Members.csv    id,profileId,networkId

Every file has a header row. Integer columns are parsed; text columns are kept
verbatim. Embeddings are not part of the source files.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, TypeVar

from pydantic import ValidationError

from ..config import settings
from ..records import Member, Network, Post, Profile

logger = logging.getLogger("rag.ingest")

R = TypeVar("R")


class CsvLoadError(RuntimeError):
    """Raised when a source file is missing or contains a malformed row."""


class CsvLoader:
    """
    Loads source records from CSV files under `data_dir`.
    """

    def __init__(self, data_dir: Optional[str | Path] = None) -> None:
        self.data_dir = Path(data_dir or settings.data_dir)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def load_networks(self) -> List[Network]:
        return self._load(
            "Networks.csv",
            lambda row: Network(id=row["id"], name=row["name"]),
        )

    def load_profiles(self) -> List[Profile]:
        return self._load(
            "Profiles.csv",
            lambda row: Profile(id=row["id"], name=row["name"], bio=row["bio"]),
        )

    def load_posts(self) -> List[Post]:
        return self._load(
            "Posts.csv",
            lambda row: Post(
                id=row["id"],
                network_id=row["networkId"],
                author=row["author"],
                content=row["content"],
            ),
        )

    def load_members(self) -> List[Member]:
        return self._load(
            "Members.csv",
            lambda row: Member(
                id=row["id"],
                profile_id=row["profileId"],
                network_id=row["networkId"],
            ),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _load(self, filename: str, transform: Callable[[Dict[str, str]], R]) -> List[R]:
        path = self.data_dir / filename
        if not path.is_file():
            raise CsvLoadError(f"Source file not found: {path}")

        records: List[R] = []
        with path.open(newline="", encoding="utf-8") as handle:
            reader = csv.DictReader(handle)
            # Line 1 is the header
            for line_no, row in enumerate(reader, start=2):
                try:
                    records.append(transform(row))
                except (KeyError, ValidationError) as exc:
                    raise CsvLoadError(
                        f"Malformed row {line_no} in {filename}: {exc}"
                    ) from exc

        logger.debug("Loaded %d rows from %s", len(records), path)
        return records
