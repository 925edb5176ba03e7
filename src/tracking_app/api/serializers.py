"""camelCase JSON views of domain objects.

Dates and datetimes are rendered as ISO-8601 strings.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from functools import singledispatch
from typing import Any, Dict, Optional

from ..attendance.model import AttendanceEntry, AttendanceRecord, CheckInResult
from ..offices.model import OfficeLocation
from ..reports.service import Report
from ..requests.model import LeaveRequest, MissionRequest, RequestEntry
from ..users.model import User, UserSummary
from ..workplans.model import WorkPlan, WorkPlanComment, WorkPlanEntry


def _iso(value: Optional[Any]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def _enum(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


@singledispatch
def to_json(obj: Any) -> Any:
    raise TypeError(f"No JSON view for {type(obj).__name__}")


@to_json.register(list)
@to_json.register(tuple)
def _(items) -> list:
    return [to_json(item) for item in items]


@to_json.register(OfficeLocation)
def _(office: OfficeLocation) -> Dict[str, Any]:
    return {
        "id": office.office_id,
        "name": office.name,
        "latitude": office.latitude,
        "longitude": office.longitude,
        "radius": office.radius,
        "isActive": office.is_active,
        "createdAt": _iso(office.created_at),
    }


@to_json.register(User)
def _(user: User) -> Dict[str, Any]:
    return {
        "id": user.user_id,
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "role": _enum(user.role),
        "position": user.position,
        "department": user.department,
        "isActive": user.is_active,
        "approvalStatus": _enum(user.approval_status),
        "registeredAt": _iso(user.registered_at),
    }


@to_json.register(UserSummary)
def _(user: UserSummary) -> Dict[str, Any]:
    return {
        "id": user.user_id,
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
    }


@to_json.register(AttendanceRecord)
def _(record: AttendanceRecord) -> Dict[str, Any]:
    return {
        "id": record.attendance_id,
        "userId": record.user_id,
        "officeId": record.office_id,
        "attendanceType": _enum(record.attendance_type),
        "latitude": record.latitude,
        "longitude": record.longitude,
        "status": _enum(record.status),
        "timestamp": _iso(record.timestamp),
    }


@to_json.register(AttendanceEntry)
def _(entry: AttendanceEntry) -> Dict[str, Any]:
    data = to_json(entry.record)
    data["office"] = to_json(entry.office) if entry.office else None
    if entry.user:
        data["user"] = to_json(entry.user)
    return data


@to_json.register(CheckInResult)
def _(result: CheckInResult) -> Dict[str, Any]:
    data = to_json(result.record)
    data["office"] = to_json(result.office)
    data["withinGeofence"] = result.within_geofence
    data["distanceFromOffice"] = round(result.distance, 2)
    return data


def _request_common(request) -> Dict[str, Any]:
    return {
        "id": request.request_id,
        "userId": request.user_id,
        "startDate": _iso(request.start_date),
        "endDate": _iso(request.end_date),
        "status": _enum(request.status),
        "approvedBy": request.approved_by,
        "approvedAt": _iso(request.approved_at),
        "createdAt": _iso(request.created_at),
    }


@to_json.register(LeaveRequest)
def _(request: LeaveRequest) -> Dict[str, Any]:
    data = _request_common(request)
    data["reason"] = request.reason
    return data


@to_json.register(MissionRequest)
def _(request: MissionRequest) -> Dict[str, Any]:
    data = _request_common(request)
    data["title"] = request.title
    data["description"] = request.description
    return data


@to_json.register(RequestEntry)
def _(entry: RequestEntry) -> Dict[str, Any]:
    data = to_json(entry.request)
    data["user"] = to_json(entry.user) if entry.user else None
    return data


@to_json.register(WorkPlanComment)
def _(comment: WorkPlanComment) -> Dict[str, Any]:
    return {
        "id": comment.comment_id,
        "authorId": comment.author_id,
        "authorRole": _enum(comment.author_role),
        "createdAt": _iso(comment.created_at),
        "text": comment.text,
    }


@to_json.register(WorkPlan)
def _(plan: WorkPlan) -> Dict[str, Any]:
    return {
        "id": plan.plan_id,
        "userId": plan.user_id,
        "title": plan.title,
        "description": plan.description,
        "dueDate": _iso(plan.due_date),
        "status": _enum(plan.status),
        "progress": plan.progress,
        "achievement": plan.achievement,
        "output": plan.output,
        "comments": plan.rendered_comments,
        "commentLog": to_json(plan.comments),
        "submittedAt": _iso(plan.submitted_at),
        "createdAt": _iso(plan.created_at),
        "updatedAt": _iso(plan.updated_at),
    }


@to_json.register(WorkPlanEntry)
def _(entry: WorkPlanEntry) -> Dict[str, Any]:
    data = to_json(entry.plan)
    data["user"] = to_json(entry.user) if entry.user else None
    return data


@to_json.register(Report)
def _(report: Report) -> Any:
    if report.is_listing:
        return to_json(list(report.items))
    return dict(report.counts or {})
