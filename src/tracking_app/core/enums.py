from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "ADMIN"
    STAFF = "STAFF"


class AttendanceType(str, Enum):
    CHECK_IN_AM = "CHECK_IN_AM"
    CHECK_OUT_AM = "CHECK_OUT_AM"
    CHECK_IN_PM = "CHECK_IN_PM"
    CHECK_OUT_PM = "CHECK_OUT_PM"


class GeofenceStatus(str, Enum):
    """Tag stored on every attendance record."""

    VALIDATED = "Validated"
    OUTSIDE = "Outside Geofence"


class RequestStatus(str, Enum):
    """Approval state shared by leave/mission requests and user registrations."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class RequestKind(str, Enum):
    LEAVE = "leave"
    MISSION = "mission"


class ResourceKind(str, Enum):
    """Resources handled by the admin approval queue."""

    USER = "user"
    LEAVE = "leave"
    MISSION = "mission"


class WorkPlanStatus(str, Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"


class ReportType(str, Enum):
    ATTENDANCE = "attendance"
    LEAVE = "leave"
    MISSION = "mission"
    WORKPLAN = "workplan"
    DAILY = "daily"
    SUMMARY = "summary"
