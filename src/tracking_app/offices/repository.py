from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import OfficeLocation


class OfficeRepository(Protocol):
    def get_by_id(self, office_id: int) -> Optional[OfficeLocation]:
        raise NotImplementedError

    def list_active(self) -> Sequence[OfficeLocation]:
        """Active offices in creation order."""

        raise NotImplementedError

    def create(self, *, name: str, latitude: float, longitude: float, radius: float) -> int:
        raise NotImplementedError

    def update(self, office_id: int, fields: dict) -> bool:
        """Partial update; keys are model field names."""

        raise NotImplementedError
