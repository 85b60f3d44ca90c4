from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
class WidgetBase(BaseModel):
    """Base widget fields shared across schemas"""
    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Display name of the widget",
        examples=["bolt"]
    )
    qty: int = Field(
        0,
        ge=0,
        description="Units in stock"
    )


class WidgetCreate(WidgetBase):
    """Create a widget"""
    pass


class WidgetUpdate(BaseModel):
    """Partial update of a widget; ID is taken from path"""
    name: Optional[str] = Field(
        None,
        min_length=1,
        max_length=255,
        description="Updated display name"
    )
    qty: Optional[int] = Field(
        None,
        ge=0,
        description="Updated units in stock"
    )


class Widget(WidgetBase):
    """A stored widget"""
    id: int = Field(
        ...,
        description="Internal unique identifier for this widget"
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Timestamp when this widget was created"
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Timestamp when this widget was last updated"
    )

    model_config = ConfigDict(from_attributes=True)
