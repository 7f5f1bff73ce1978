"""PTO approval routing.

CORE_APPROVERS review every request. DEPARTMENT_APPROVERS add a secondary
reviewer for their department. SPECIAL_ROUTING replaces the whole list for
the listed employees.
"""

CORE_APPROVERS = [
    {"email": "owner@example.com", "name": "Company Owner", "role": "SYSTEM_ADMIN"},
    {"email": "gm@example.com", "name": "General Manager", "role": "GENERAL_MANAGER"},
    {"email": "ops.lead@example.com", "name": "Operations Lead", "role": "Core Approver"},
    {"email": "hr.lead@example.com", "name": "HR Lead", "role": "Core Approver"},
]

DEPARTMENT_APPROVERS = {
    "Production": [
        {"email": "production.manager@example.com", "name": "Production Manager", "role": "Production Manager"},
    ],
}

SPECIAL_ROUTING = {
    "gm@example.com": ["owner@example.com", "hr.lead@example.com"],
    "ops.lead@example.com": ["owner@example.com", "hr.lead@example.com"],
}
