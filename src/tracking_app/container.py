from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .approvals.service import ApprovalWorkflow
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_OFFICE_RADIUS_M, DEFAULT_TOKEN_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .offices.mysql_office_repository import MySQLOfficeRepository
from .offices.repository import OfficeRepository
from .offices.service import OfficeService
from .reports.service import ReportService
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.repository import RequestRepository
from .requests.service import RequestService
from .security.tokens import TokenService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .workplans.mysql_workplan_repository import MySQLWorkPlanRepository
from .workplans.repository import WorkPlanRepository
from .workplans.service import WorkPlanService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    api_version: str

    users_repo: UserRepository
    offices_repo: OfficeRepository
    attendance_repo: AttendanceRepository
    requests_repo: RequestRepository
    workplans_repo: WorkPlanRepository

    token_service: TokenService
    auth_service: AuthService
    user_service: UserService
    office_service: OfficeService
    attendance_service: AttendanceService
    request_service: RequestService
    approval_workflow: ApprovalWorkflow
    workplan_service: WorkPlanService
    report_service: ReportService


def assemble(
    *,
    users_repo: UserRepository,
    offices_repo: OfficeRepository,
    attendance_repo: AttendanceRepository,
    requests_repo: RequestRepository,
    workplans_repo: WorkPlanRepository,
    token_service: TokenService,
    conn: Optional[DatabaseConnection] = None,
    default_office_radius: float = DEFAULT_OFFICE_RADIUS_M,
    api_version: str = "1.0.0",
) -> Container:
    """Wire services on top of any repository implementations (MySQL or in-memory)."""
    return Container(
        conn=conn,
        api_version=api_version,
        users_repo=users_repo,
        offices_repo=offices_repo,
        attendance_repo=attendance_repo,
        requests_repo=requests_repo,
        workplans_repo=workplans_repo,
        token_service=token_service,
        auth_service=AuthService(users_repo, token_service),
        user_service=UserService(users_repo),
        office_service=OfficeService(offices_repo, default_radius=default_office_radius),
        attendance_service=AttendanceService(attendance_repo, offices_repo),
        request_service=RequestService(requests_repo),
        approval_workflow=ApprovalWorkflow(users_repo, requests_repo),
        workplan_service=WorkPlanService(workplans_repo),
        report_service=ReportService(attendance_repo, requests_repo, workplans_repo, users_repo),
    )


def build_container(
    *,
    db_config: dict,
    jwt_secret: str,
    jwt_algorithm: str = "HS256",
    jwt_expires_hours: int = DEFAULT_TOKEN_HOURS,
    default_office_radius: float = DEFAULT_OFFICE_RADIUS_M,
    api_version: str = "1.0.0",
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        users_repo=MySQLUserRepository(conn),
        offices_repo=MySQLOfficeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        requests_repo=MySQLRequestRepository(conn),
        workplans_repo=MySQLWorkPlanRepository(conn),
        token_service=TokenService(jwt_secret, algorithm=jwt_algorithm, expires_hours=jwt_expires_hours),
        conn=conn,
        default_office_radius=default_office_radius,
        api_version=api_version,
    )
