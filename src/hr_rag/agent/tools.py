"""
HR tools exposed to the agent loop.

Each tool wraps a function of the HR data source, declares a pydantic input
schema (snake_case or camelCase argument names are both accepted) and returns
human-readable text for the model.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from langchain_core.tools import BaseTool, StructuredTool
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .. import hr_services
from ..hr_services import EmployeeNotFoundError

logger = logging.getLogger(__name__)


class EmployeeIdInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    employee_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("employee_id", "employeeId"),
        description="Employee ID, e.g. EMP001",
    )


class DirectorySearchInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(..., description="Name, job title or department to search for")
    department: Optional[str] = Field(None, description="Restrict results to this department")


class ScheduleInput(EmployeeIdInput):
    date: Optional[str] = Field(None, description="Day in YYYY-MM-DD format, defaults to today")


def get_vacation_balance(employee_id: str) -> str:
    try:
        balance = hr_services.get_vacation_balance(employee_id)
    except EmployeeNotFoundError as e:
        return str(e)
    return (
        f"{balance.name} has {balance.remaining_days} vacation days remaining out of {balance.total_days} total. "
        f"{balance.used_days} used, {balance.pending_requests} pending requests."
    )


def get_salary_info(employee_id: str) -> str:
    try:
        salary = hr_services.get_salary_info(employee_id)
    except EmployeeNotFoundError as e:
        return str(e)
    return (
        f"{salary.name}: base salary {salary.base_salary:,} {salary.currency}, "
        f"paid {salary.pay_frequency}. Last raise on {salary.last_raise_date}."
    )


def search_directory(query: str, department: Optional[str] = None) -> str:
    employees = hr_services.search_directory(query, department)
    if not employees:
        return f"No employees found matching '{query}'."
    lines = [f"Found {len(employees)} employee(s):"]
    for emp in employees:
        lines.append(f"- {emp.name} ({emp.id}), {emp.title}, {emp.department}, {emp.location}. {emp.email}, {emp.phone}")
    return "\n".join(lines)


def get_schedule(employee_id: str, date: Optional[str] = None) -> str:
    try:
        employee = hr_services.get_employee(employee_id)
        entries = hr_services.get_schedule(employee_id, date)
    except EmployeeNotFoundError as e:
        return str(e)
    if not entries:
        return f"{employee.name} has nothing scheduled on {date or 'that day'}."
    lines = [f"Schedule for {employee.name} on {entries[0].date}:"]
    for entry in entries:
        lines.append(f"- {entry.start_time}-{entry.end_time} {entry.title} ({entry.type}, {entry.location})")
    return "\n".join(lines)


def create_hr_tools() -> List[BaseTool]:
    """Build the LangChain tools over the HR data source."""
    return [
        StructuredTool.from_function(
            func=get_vacation_balance,
            name="get_vacation_balance",
            description="Get the remaining, used and pending vacation days of an employee.",
            args_schema=EmployeeIdInput,
        ),
        StructuredTool.from_function(
            func=get_salary_info,
            name="get_salary_info",
            description="Get the base salary, pay frequency and last raise date of an employee.",
            args_schema=EmployeeIdInput,
        ),
        StructuredTool.from_function(
            func=search_directory,
            name="search_directory",
            description="Search the employee directory by name, title or department.",
            args_schema=DirectorySearchInput,
        ),
        StructuredTool.from_function(
            func=get_schedule,
            name="get_schedule",
            description="Get the meetings and blocks scheduled for an employee on a given date.",
            args_schema=ScheduleInput,
        ),
    ]


class ToolRegistry:
    """
    Name-addressed set of tools.

    Arguments are validated against the tool's schema before the tool runs;
    a pydantic ``ValidationError`` is raised for invalid input.
    """

    def __init__(self, tools: Optional[Sequence[BaseTool]] = None):
        tools = create_hr_tools() if tools is None else tools
        self._tools: Dict[str, BaseTool] = {tool.name: tool for tool in tools}

    @property
    def tools(self) -> List[BaseTool]:
        return list(self._tools.values())

    @property
    def names(self) -> List[str]:
        return list(self._tools)

    def get(self, name: str) -> BaseTool:
        if name not in self._tools:
            raise ValueError(f"Tool {name} not found")
        return self._tools[name]

    async def execute(self, name: str, arguments: Dict[str, Any]) -> str:
        """Validate ``arguments`` and run the named tool."""
        tool = self.get(name)
        validated = tool.args_schema.model_validate(arguments or {})
        logger.info(f"Executing tool {name} with {validated.model_dump()}")
        result = await tool.ainvoke(validated.model_dump())
        return str(result)
