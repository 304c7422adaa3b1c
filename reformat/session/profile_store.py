"""
Saved-profile persistence.

The saved profiles are one JSON array of settings records under a single
storage key (a file in the data directory). Every change rewrites the
whole array; there is no incremental patching.

A corrupt or unreadable store is discarded: it loads as an empty
collection and the problem is logged, never raised.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from reformat.core.settings import UserSettings


class ProfileRepository(ABC):
    """Storage for the saved-profiles collection."""

    @abstractmethod
    def load(self) -> list[UserSettings]:
        """Read the whole collection. Never raises on corrupt data."""
        pass

    @abstractmethod
    def save(self, profiles: list[UserSettings]) -> bool:
        """Overwrite the whole collection. Returns False if it could not be written."""
        pass


class JsonProfileRepository(ProfileRepository):
    """Saved profiles in a JSON file, e.g. ~/.reformat/saved_profiles.json."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> list[UserSettings]:
        if not self.path.exists():
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Discarding unreadable saved profiles at {self.path}: {e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"Discarding saved profiles at {self.path}: expected a JSON array")
            return []

        try:
            return [UserSettings.from_storage(item) for item in data]
        except (ValidationError, TypeError) as e:
            logger.warning(f"Discarding corrupt saved profiles at {self.path}: {e}")
            return []

    def save(self, profiles: list[UserSettings]) -> bool:
        payload = [p.to_storage() for p in profiles]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
        except OSError as e:
            logger.warning(f"Could not write saved profiles to {self.path}: {e}")
            return False

        logger.debug(f"Wrote {len(payload)} saved profile(s) to {self.path}")
        return True


class InMemoryProfileRepository(ProfileRepository):
    """Process-local store, used when no data directory is wanted."""

    def __init__(self, profiles: list[UserSettings] | None = None):
        self._profiles = list(profiles or [])
        self.save_count = 0

    def load(self) -> list[UserSettings]:
        return list(self._profiles)

    def save(self, profiles: list[UserSettings]) -> bool:
        self._profiles = list(profiles)
        self.save_count += 1
        return True
