"""Presentation-only view models shared by every page."""
from pydantic import BaseModel
from typing import Optional, Literal, Union


AlertType = Literal["success", "error", "warning", "info"]
BadgeVariant = Literal["default", "success", "warning", "danger", "info"]


class Alert(BaseModel):
    type: AlertType = "info"
    message: str
    title: Optional[str] = None
    dismissible: bool = True
    # Seconds before the alert hides itself; None keeps it until dismissed
    dismiss_after: Optional[float] = None


class Badge(BaseModel):
    label: str
    variant: BadgeVariant = "default"
    color: Optional[str] = None


class SummaryCard(BaseModel):
    title: str
    value: Union[int, float, str]
    hint: Optional[str] = None


class EmptyState(BaseModel):
    message: str
