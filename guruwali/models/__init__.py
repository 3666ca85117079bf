from guruwali.models.user import User, SchoolProfile
from guruwali.models.student import Student, StudentSocialUsage
from guruwali.models.records import MonthlyJournal, MeetingLog, Intervention

__all__ = [
    "User",
    "SchoolProfile",
    "Student",
    "StudentSocialUsage",
    "MonthlyJournal",
    "MeetingLog",
    "Intervention",
]
