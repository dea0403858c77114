from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository, MySQLClassRepository
from .attendance.service import AttendanceService
from .backups.mysql_backup_repository import MySQLBackupRepository
from .backups.service import BackupService
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .invoices.mysql_invoice_repository import MySQLInvoiceRepository
from .invoices.service import InvoiceService
from .newsletters.mysql_newsletter_repository import MySQLFormRepository, MySQLNewsletterRepository
from .newsletters.service import NewsletterService
from .payroll.mysql_payroll_repository import MySQLPayrollRecordRepository, MySQLPayrollSummaryRepository
from .payroll.service import PayrollService
from .platform.functions import FunctionsClient
from .platform.storage import DEFAULT_SIGNED_URL_TTL, LocalFileStorage
from .profiles.mysql_profile_repository import MySQLProfileRepository
from .profiles.service import AuthService, ProfileService
from .teams.mysql_team_repository import MySQLTeamRepository
from .teams.service import TeamService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    profiles_repo: MySQLProfileRepository
    invoices_repo: MySQLInvoiceRepository
    payroll_records_repo: MySQLPayrollRecordRepository
    payroll_summaries_repo: MySQLPayrollSummaryRepository
    classes_repo: MySQLClassRepository
    attendance_repo: MySQLAttendanceRepository
    newsletters_repo: MySQLNewsletterRepository
    forms_repo: MySQLFormRepository
    backups_repo: MySQLBackupRepository
    teams_repo: MySQLTeamRepository

    functions: FunctionsClient
    storage: LocalFileStorage

    auth_service: AuthService
    profile_service: ProfileService
    invoice_service: InvoiceService
    payroll_service: PayrollService
    attendance_service: AttendanceService
    dashboard_service: DashboardService
    newsletter_service: NewsletterService
    backup_service: BackupService
    team_service: TeamService


def build_container(*, db_config: dict, settings=None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    functions = FunctionsClient(
        getattr(settings, "PLATFORM_URL", ""),
        getattr(settings, "PLATFORM_KEY", ""),
        timeout=getattr(settings, "FUNCTIONS_TIMEOUT", None),
    )
    storage = LocalFileStorage(
        Path(getattr(settings, "STORAGE_ROOT", "storage")),
        getattr(settings, "SECRET_KEY", "dev-secret-key"),
        default_ttl=int(getattr(settings, "SIGNED_URL_TTL", DEFAULT_SIGNED_URL_TTL)),
    )

    profiles_repo = MySQLProfileRepository(conn)
    invoices_repo = MySQLInvoiceRepository(conn)
    payroll_records_repo = MySQLPayrollRecordRepository(conn)
    payroll_summaries_repo = MySQLPayrollSummaryRepository(conn)
    classes_repo = MySQLClassRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    newsletters_repo = MySQLNewsletterRepository(conn)
    forms_repo = MySQLFormRepository(conn)
    backups_repo = MySQLBackupRepository(conn)
    teams_repo = MySQLTeamRepository(conn)

    return Container(
        conn=conn,
        profiles_repo=profiles_repo,
        invoices_repo=invoices_repo,
        payroll_records_repo=payroll_records_repo,
        payroll_summaries_repo=payroll_summaries_repo,
        classes_repo=classes_repo,
        attendance_repo=attendance_repo,
        newsletters_repo=newsletters_repo,
        forms_repo=forms_repo,
        backups_repo=backups_repo,
        teams_repo=teams_repo,
        functions=functions,
        storage=storage,
        auth_service=AuthService(profiles_repo),
        profile_service=ProfileService(profiles_repo),
        invoice_service=InvoiceService(invoices_repo, functions, storage),
        payroll_service=PayrollService(payroll_records_repo, payroll_summaries_repo, functions, storage),
        attendance_service=AttendanceService(classes_repo, attendance_repo),
        dashboard_service=DashboardService(invoices_repo, payroll_records_repo),
        newsletter_service=NewsletterService(newsletters_repo, forms_repo, functions),
        backup_service=BackupService(backups_repo, functions),
        team_service=TeamService(teams_repo),
    )
