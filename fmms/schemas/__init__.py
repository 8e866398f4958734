"""Schema exports."""

from fmms.schemas.auth import RegistrationRequest, RegistrationResponse, Token
from fmms.schemas.medication import (
    DailyTimesUpdate,
    MedicationCreate,
    MedicationRead,
    MedicationUpdate,
    RefillRequest,
    TakeDoseRequest,
)
from fmms.schemas.person import PersonCreate, PersonRead, PersonUpdate
from fmms.schemas.reminder import Reminder, UpcomingDose
from fmms.schemas.reporting import (
    DashboardSummary,
    LowSupplyEntry,
    MedicationSummaryReport,
    MedicationSummaryRow,
    MedicationSummaryStatistics,
    PeopleSummaryReport,
    PersonSummaryRow,
)
from fmms.schemas.schedule import (
    DoseRecordRequest,
    ScheduleCreate,
    ScheduleEvaluation,
    ScheduleRead,
    ScheduleUpdate,
)
from fmms.schemas.search import SearchResult
from fmms.schemas.user import HouseholdRead, UserRead

__all__ = [
    "DailyTimesUpdate",
    "DashboardSummary",
    "DoseRecordRequest",
    "HouseholdRead",
    "LowSupplyEntry",
    "MedicationCreate",
    "MedicationRead",
    "MedicationSummaryReport",
    "MedicationSummaryRow",
    "MedicationSummaryStatistics",
    "MedicationUpdate",
    "PeopleSummaryReport",
    "PersonCreate",
    "PersonRead",
    "PersonSummaryRow",
    "PersonUpdate",
    "RefillRequest",
    "RegistrationRequest",
    "RegistrationResponse",
    "Reminder",
    "ScheduleCreate",
    "ScheduleEvaluation",
    "ScheduleRead",
    "ScheduleUpdate",
    "SearchResult",
    "TakeDoseRequest",
    "Token",
    "UpcomingDose",
    "UserRead",
]
