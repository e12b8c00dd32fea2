"""
Mock HR data source backing the agent tools.

Provides employee directory, vacation balances, salary information and daily
schedules for a small fixed set of employees (EMP001-EMP006).
"""

import logging
from datetime import date as date_type
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# Pydantic models for validation
class Employee(BaseModel):
    """Employee directory entry."""

    id: str = Field(..., description="Employee ID, e.g. EMP001")
    name: str = Field(..., description="Full name")
    email: str = Field(..., description="Work email address")
    department: str = Field(..., description="Department")
    title: str = Field(..., description="Job title")
    phone: str = Field(..., description="Phone number")
    location: str = Field(..., description="Office location")


class VacationBalance(BaseModel):
    """Vacation balance information."""

    employee_id: str
    name: str
    total_days: int = Field(..., description="Yearly vacation allowance")
    used_days: int = Field(..., description="Days already taken")
    remaining_days: int = Field(..., description="Days still available")
    pending_requests: int = Field(..., description="Requests awaiting approval")


class SalaryInfo(BaseModel):
    """Salary and compensation details."""

    employee_id: str
    name: str
    base_salary: int
    currency: str
    pay_frequency: Literal["monthly", "bi-weekly"]
    last_raise_date: str


class ScheduleEntry(BaseModel):
    """One block in an employee's day."""

    date: str
    start_time: str
    end_time: str
    title: str
    location: str
    type: Literal["meeting", "focus", "break", "other"]


class EmployeeNotFoundError(ValueError):
    """Raised when an employee ID is not in the system."""


# Mock employee database
EMPLOYEE_DATABASE = {
    "EMP001": {
        "id": "EMP001",
        "name": "Alice Martin",
        "email": "alice.martin@company.com",
        "department": "Engineering",
        "title": "Software Engineer",
        "phone": "+41 44 555 0101",
        "location": "Zurich",
    },
    "EMP002": {
        "id": "EMP002",
        "name": "Bruno Rossi",
        "email": "bruno.rossi@company.com",
        "department": "Engineering",
        "title": "Engineering Manager",
        "phone": "+39 02 555 0102",
        "location": "Milan",
    },
    "EMP003": {
        "id": "EMP003",
        "name": "Chloe Dubois",
        "email": "chloe.dubois@company.com",
        "department": "HR",
        "title": "HR Business Partner",
        "phone": "+41 22 555 0103",
        "location": "Geneva",
    },
    "EMP004": {
        "id": "EMP004",
        "name": "Daniel Weber",
        "email": "daniel.weber@company.com",
        "department": "Finance",
        "title": "Financial Analyst",
        "phone": "+41 44 555 0104",
        "location": "Zurich",
    },
    "EMP005": {
        "id": "EMP005",
        "name": "Elena Costa",
        "email": "elena.costa@company.com",
        "department": "Marketing",
        "title": "Marketing Specialist",
        "phone": "+39 02 555 0105",
        "location": "Milan",
    },
    "EMP006": {
        "id": "EMP006",
        "name": "Farid Haddad",
        "email": "farid.haddad@company.com",
        "department": "Sales",
        "title": "Account Executive",
        "phone": "+41 44 555 0106",
        "location": "Zurich",
    },
}

# Mock vacation balances: (total, used, pending)
VACATION_DATABASE = {
    "EMP001": (25, 13, 1),
    "EMP002": (25, 5, 0),
    "EMP003": (25, 20, 2),
    "EMP004": (25, 0, 0),
    "EMP005": (25, 9, 1),
    "EMP006": (25, 22, 3),
}

# Mock salaries: (base, frequency, last raise)
SALARY_DATABASE = {
    "EMP001": (98000, "monthly", "2025-04-01"),
    "EMP002": (142000, "monthly", "2025-01-01"),
    "EMP003": (87000, "bi-weekly", "2024-10-01"),
    "EMP004": (91000, "monthly", "2025-07-01"),
    "EMP005": (76000, "bi-weekly", "2025-03-15"),
    "EMP006": (83000, "monthly", "2024-12-01"),
}

# Mock daily schedules: (start, end, title, location, type)
SCHEDULE_DATABASE = {
    "EMP001": [
        ("09:00", "09:15", "Team Standup", "Zoom", "meeting"),
        ("10:00", "12:00", "Focus time", "Desk", "focus"),
        ("14:00", "15:00", "Sprint Planning", "Room A", "meeting"),
    ],
    "EMP002": [
        ("09:00", "09:15", "Team Standup", "Zoom", "meeting"),
        ("11:00", "11:30", "1:1 with Alice", "Room B", "meeting"),
    ],
    "EMP003": [
        ("10:00", "11:00", "Onboarding session", "Room C", "meeting"),
        ("12:00", "13:00", "Lunch", "Cafeteria", "break"),
    ],
    "EMP004": [
        ("08:00", "12:00", "Quarter close", "Desk", "focus"),
    ],
    "EMP005": [],
    "EMP006": [
        ("15:00", "16:00", "Client call", "Zoom", "meeting"),
    ],
}


def get_employee(employee_id: str) -> Employee:
    """
    Retrieve a directory entry by employee ID.

    Raises:
        EmployeeNotFoundError: If the ID is not found in the system
    """
    if employee_id not in EMPLOYEE_DATABASE:
        logger.warning(f"Employee not found: {employee_id}")
        raise EmployeeNotFoundError(f"Employee {employee_id} not found")
    return Employee(**EMPLOYEE_DATABASE[employee_id])


def get_vacation_balance(employee_id: str) -> VacationBalance:
    """
    Retrieve remaining vacation days for an employee.

    Raises:
        EmployeeNotFoundError: If the ID is not found in the system
    """
    logger.info(f"get_vacation_balance called with employee_id: {employee_id}")
    employee = get_employee(employee_id)
    total, used, pending = VACATION_DATABASE[employee_id]
    return VacationBalance(
        employee_id=employee_id,
        name=employee.name,
        total_days=total,
        used_days=used,
        remaining_days=total - used,
        pending_requests=pending,
    )


def get_salary_info(employee_id: str) -> SalaryInfo:
    """
    Retrieve salary details for an employee.

    Raises:
        EmployeeNotFoundError: If the ID is not found in the system
    """
    logger.info(f"get_salary_info called with employee_id: {employee_id}")
    employee = get_employee(employee_id)
    base, frequency, last_raise = SALARY_DATABASE[employee_id]
    return SalaryInfo(
        employee_id=employee_id,
        name=employee.name,
        base_salary=base,
        currency="USD",
        pay_frequency=frequency,
        last_raise_date=last_raise,
    )


def search_directory(query: str, department: Optional[str] = None) -> List[Employee]:
    """Case-insensitive match on name, title or department, optionally filtered by department."""
    logger.info(f"search_directory called with query='{query}', department={department}")
    q = query.lower()
    matches = []
    for data in EMPLOYEE_DATABASE.values():
        employee = Employee(**data)
        matches_query = q in employee.name.lower() or q in employee.title.lower() or q in employee.department.lower()
        matches_department = not department or employee.department.lower() == department.lower()
        if matches_query and matches_department:
            matches.append(employee)
    return matches


def get_schedule(employee_id: str, date: Optional[str] = None) -> List[ScheduleEntry]:
    """
    Retrieve the schedule of an employee for a day (default today).

    Raises:
        EmployeeNotFoundError: If the ID is not found in the system
    """
    logger.info(f"get_schedule called with employee_id={employee_id}, date={date}")
    get_employee(employee_id)
    day = date or date_type.today().isoformat()
    return [
        ScheduleEntry(date=day, start_time=start, end_time=end, title=title, location=location, type=kind)
        for start, end, title, location, kind in SCHEDULE_DATABASE.get(employee_id, [])
    ]
