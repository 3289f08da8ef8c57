from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

Profile = Dict[str, Any]


class ProfileDirectory(ABC):
    """Read-only lookup of artist and programmer profiles by user id."""

    @abstractmethod
    async def lookup_artist(self, uid: str) -> Optional[Profile]:
        ...

    @abstractmethod
    async def lookup_programmer(self, uid: str) -> Optional[Profile]:
        ...
