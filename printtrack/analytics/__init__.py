"""Dashboard analytics and CSV export."""

from printtrack.analytics.reports import (
    DashboardReport,
    PrinterSummary,
    ReportGenerator,
    ReportPeriod,
    average_print_minutes,
    generate_report,
    grams_by_material,
    maintenance_counts,
    period_key,
    print_minutes_by_period,
)
from printtrack.analytics.export import (
    JOB_FIELDS,
    LOG_FIELDS,
    export_jobs_csv,
    export_logs_csv,
    jobs_csv_text,
    logs_csv_text,
)

__all__ = [
    "DashboardReport",
    "PrinterSummary",
    "ReportGenerator",
    "ReportPeriod",
    "average_print_minutes",
    "generate_report",
    "grams_by_material",
    "maintenance_counts",
    "period_key",
    "print_minutes_by_period",
    "JOB_FIELDS",
    "LOG_FIELDS",
    "export_jobs_csv",
    "export_logs_csv",
    "jobs_csv_text",
    "logs_csv_text",
]
