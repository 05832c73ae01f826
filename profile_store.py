"""In-memory profile storage.

Single-process only; profiles are lost on restart. Writes replace the whole
record (last write wins).
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from models import Profile

logger = logging.getLogger(__name__)


class ProfileNotFoundError(KeyError):
    """No profile with the requested id."""


class InMemoryProfileStore:
    def __init__(self):
        self._profiles: Dict[str, Profile] = {}

    def create(self, profile: Profile) -> Profile:
        self._profiles[profile.id] = profile
        logger.info(f"Created profile {profile.id} ({profile.product_name})")
        return profile

    def get(self, profile_id: str) -> Profile:
        profile = self._profiles.get(profile_id)
        if profile is None:
            raise ProfileNotFoundError(profile_id)
        return profile

    def list(self) -> List[Profile]:
        """All profiles, newest first."""
        return sorted(self._profiles.values(), key=lambda p: p.created_at, reverse=True)

    def update(self, profile: Profile) -> Profile:
        if profile.id not in self._profiles:
            raise ProfileNotFoundError(profile.id)
        profile.updated_at = datetime.utcnow()
        self._profiles[profile.id] = profile
        return profile

    def delete(self, profile_id: str) -> None:
        if self._profiles.pop(profile_id, None) is None:
            raise ProfileNotFoundError(profile_id)
        logger.info(f"Deleted profile {profile_id}")

    def clear(self) -> None:
        self._profiles.clear()


_store: Optional[InMemoryProfileStore] = None


def get_profile_store() -> InMemoryProfileStore:
    global _store
    if _store is None:
        _store = InMemoryProfileStore()
    return _store
