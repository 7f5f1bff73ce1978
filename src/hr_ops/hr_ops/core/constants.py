"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import Role

# Roles allowed to review PTO and file requests on behalf of other employees.
MANAGER_ROLES = frozenset(
    {
        Role.SYSTEM_ADMIN,
        Role.HR_ADMIN,
        Role.GENERAL_MANAGER,
        Role.TERRITORY_MANAGER,
        Role.MANAGER,
        Role.TEAM_LEAD,
    }
)

# Only these roles may mark a PTO request as exempt from the balance.
EXEMPT_ROLES = frozenset({Role.SYSTEM_ADMIN, Role.HR_ADMIN, Role.GENERAL_MANAGER})

# Managers copied on upcoming PTO reminders.
REMINDER_ROLES = frozenset(
    {
        Role.SYSTEM_ADMIN,
        Role.HR_ADMIN,
        Role.GENERAL_MANAGER,
        Role.MANAGER,
        Role.TERRITORY_MANAGER,
    }
)

HR_ROLES = frozenset({Role.SYSTEM_ADMIN, Role.HR_ADMIN})

WINTER_MONTHS = frozenset({12, 1, 2})
DEFAULT_REQUIRED_WINTER_DAYS = 5

DEFAULT_VACATION_DAYS = 10
DEFAULT_SICK_DAYS = 5
DEFAULT_PERSONAL_DAYS = 2

PTO_REMINDER_WINDOWS = (30, 7, 1)
PTO_REMINDER_COOLDOWN_HOURS = 24

INTERVIEW_FEEDBACK_REMINDER_DAYS = 1
INTERVIEW_ESCALATION_DAYS = 3
INTERVIEW_AUTO_NO_SHOW_DAYS = 7

OVERDUE_NOTIFICATION_COOLDOWN_HOURS = 24

EQUIPMENT_TOKEN_EXPIRY_DAYS = 30

DEFAULT_NOTIFICATION_LIMIT = 50
DEFAULT_LIST_LIMIT = 200
