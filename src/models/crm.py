"""
Data models for CRM and HR records (leads, deals, payroll).
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.config import LEAD_STATUSES


class Lead(BaseModel):
    """Sales lead as stored in the leads table."""

    model_config = ConfigDict(extra="ignore")

    id: int | str
    title: str
    description: str | None = None
    value: float = 0.0
    status: str = "new"
    source: str | None = None
    created_by: str | None = None
    created_at: datetime | None = None

    @field_validator("value", mode="before")
    @classmethod
    def null_value(cls, value):
        return 0.0 if value is None else value


class LeadCreate(BaseModel):
    """Fields accepted when creating a lead."""

    title: str = Field(min_length=1)
    description: str = ""
    value: float = 0.0
    status: str = "new"
    source: str = ""

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value

    @field_validator("status")
    @classmethod
    def known_status(cls, value: str) -> str:
        if value not in LEAD_STATUSES:
            raise ValueError(f"Unknown lead status '{value}'")
        return value


class Deal(BaseModel):
    """Sales opportunity in the pipeline."""

    model_config = ConfigDict(extra="ignore")

    id: int | str
    title: str
    value: float = 0.0
    stage: str = "prospecting"
    company_id: int | str | None = None
    contact_id: int | str | None = None

    @field_validator("value", mode="before")
    @classmethod
    def null_value(cls, value):
        return 0.0 if value is None else value


class PayrollRecord(BaseModel):
    """Monthly salary record for one employee."""

    model_config = ConfigDict(extra="ignore")

    id: int | str
    employee_id: int | str
    month: int = Field(ge=1, le=12)
    year: int
    basic_salary: float = Field(default=0.0, ge=0)
    allowances: float = Field(default=0.0, ge=0)
    deductions: float = Field(default=0.0, ge=0)
    status: str | None = None
    employee_name: str | None = None

    @model_validator(mode="before")
    @classmethod
    def flatten_employee(cls, data):
        if isinstance(data, dict) and isinstance(data.get("employee"), dict):
            data = {**data, "employee_name": data["employee"].get("full_name")}
        return data

    @field_validator("basic_salary", "allowances", "deductions", mode="before")
    @classmethod
    def null_amount(cls, value):
        return 0.0 if value is None else value
