from datetime import date, datetime
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Currency = Literal["USD", "EUR", "GBP", "MAD"]

# Amounts and flags pass through untouched; the analyzers coerce them.
Amount = Any
DateLike = Optional[Union[datetime, date, str]]


class FinanceRecord(BaseModel):
    """Fields shared by costs, expenses and budgets. Accepts camelCase or snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    name: Optional[str] = None
    amount: Amount = None
    currency: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    project_id: Optional[str] = None


class Cost(FinanceRecord):
    date: DateLike = None
    task_id: Optional[str] = None


class Expense(FinanceRecord):
    frequency: Optional[str] = None
    is_active: Any = False
    start_date: DateLike = None
    end_date: DateLike = None


class Budget(FinanceRecord):
    period: Optional[str] = None
    start_date: DateLike = None
    end_date: DateLike = None


class EstimatedCost(BaseModel):
    amount: Amount = None
    currency: Optional[str] = None


class Task(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    uid: Optional[str] = None
    title: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    project_id: Optional[str] = None
    estimated_cost: Optional[EstimatedCost] = None


class AnalyticsRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    costs: List[Cost] = Field(default_factory=list)
    expenses: List[Expense] = Field(default_factory=list)
    budgets: List[Budget] = Field(default_factory=list)
    currency: Optional[Currency] = None
    project_id: Optional[str] = None
    as_of: Optional[date] = None


class ProjectAnalyticsRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    costs: List[Cost] = Field(default_factory=list)
    expenses: List[Expense] = Field(default_factory=list)
    budgets: List[Budget] = Field(default_factory=list)
    tasks: List[Task] = Field(default_factory=list)
    currency: Optional[Currency] = None
    as_of: Optional[date] = None


def dump_records(records: List[BaseModel]) -> List[dict]:
    return [record.model_dump() for record in records]
