from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..common.validators import parse_bool, require_float, require_int, require_non_empty
from ..core.constants import DEFAULT_OFFICE_RADIUS_M
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import OfficeLocation
from .repository import OfficeRepository

logger = logging.getLogger(__name__)


class OfficeService:
    """Use case: manage office geofences (admin) and read them (anyone)."""

    def __init__(self, offices: OfficeRepository, *, default_radius: float = DEFAULT_OFFICE_RADIUS_M):
        self._offices = offices
        self._default_radius = float(default_radius)

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Access denied. Insufficient permissions.")

    @staticmethod
    def _latitude(value: Any) -> float:
        lat = require_float(value, "latitude")
        if not -90.0 <= lat <= 90.0:
            raise ValidationError("latitude must be between -90 and 90")
        return lat

    @staticmethod
    def _longitude(value: Any) -> float:
        lon = require_float(value, "longitude")
        if not -180.0 <= lon <= 180.0:
            raise ValidationError("longitude must be between -180 and 180")
        return lon

    @staticmethod
    def _radius(value: Any) -> float:
        radius = require_float(value, "radius")
        if radius <= 0:
            raise ValidationError("radius must be greater than 0")
        return radius

    def list_active(self) -> Sequence[OfficeLocation]:
        return self._offices.list_active()

    def get(self, office_id: int) -> OfficeLocation:
        office = self._offices.get_by_id(int(office_id))
        if not office:
            raise NotFoundError("Office location not found")
        return office

    def create(
        self,
        *,
        current_role: Role,
        name: Any,
        latitude: Any,
        longitude: Any,
        radius: Any = None,
    ) -> OfficeLocation:
        self._require_admin(current_role)
        if not name or latitude is None or longitude is None:
            raise ValidationError("Name, latitude, and longitude are required")

        office_id = self._offices.create(
            name=require_non_empty(name, "name"),
            latitude=self._latitude(latitude),
            longitude=self._longitude(longitude),
            radius=self._radius(radius) if radius not in (None, "") else self._default_radius,
        )
        office = self.get(office_id)
        logger.info("Office %s created (%s, r=%sm)", office.office_id, office.name, office.radius)
        return office

    def update(self, *, current_role: Role, office_id: Any, changes: dict) -> OfficeLocation:
        self._require_admin(current_role)
        office_id = require_int(office_id, "id")
        self.get(office_id)

        fields: dict = {}
        if changes.get("name") is not None:
            fields["name"] = require_non_empty(changes["name"], "name")
        if changes.get("latitude") is not None:
            fields["latitude"] = self._latitude(changes["latitude"])
        if changes.get("longitude") is not None:
            fields["longitude"] = self._longitude(changes["longitude"])
        if changes.get("radius") is not None:
            fields["radius"] = self._radius(changes["radius"])
        if changes.get("isActive") is not None:
            fields["is_active"] = parse_bool(changes["isActive"], "isActive")

        if fields and not self._offices.update(office_id, fields):
            raise NotFoundError("Office location not found")
        logger.info("Office %s updated: %s", office_id, sorted(fields))
        return self.get(office_id)

    def deactivate(self, *, current_role: Role, office_id: Optional[Any]) -> None:
        """Soft delete: attendance history keeps pointing at the office."""
        self._require_admin(current_role)
        office_id = require_int(office_id, "id")
        self.get(office_id)
        self._offices.update(office_id, {"is_active": False})
        logger.info("Office %s deactivated", office_id)
