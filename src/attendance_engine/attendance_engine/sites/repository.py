from __future__ import annotations

from typing import Protocol, Sequence

from ..core.enums import LocationType
from .model import WorkLocation


class SiteDirectory(Protocol):
    """Read-only work-site lookup."""

    def sites_for_type(self, location_type: LocationType) -> Sequence[WorkLocation]:
        raise NotImplementedError
