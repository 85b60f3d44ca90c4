from __future__ import annotations

import itertools
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from models.widget import Widget, WidgetCreate, WidgetUpdate

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# In-memory store
# -----------------------------------------------------------------------------
class WidgetStore:
    """Keeps widgets in insertion order for the lifetime of the process."""

    def __init__(self) -> None:
        self._widgets: Dict[int, Widget] = {}
        self._ids = itertools.count(1)

    def list(self, search: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[Widget]:
        widgets = list(self._widgets.values())
        if search:
            widgets = [w for w in widgets if search.lower() in w.name.lower()]
        return widgets[skip:skip + limit]

    def get(self, widget_id: int) -> Optional[Widget]:
        return self._widgets.get(widget_id)

    def create(self, widget_req: WidgetCreate) -> Widget:
        widget = Widget(id=next(self._ids), **widget_req.model_dump())
        self._widgets[widget.id] = widget
        logger.info("Created widget %d", widget.id)
        return widget

    def replace(self, widget_id: int, widget_req: WidgetCreate) -> Optional[Widget]:
        existing = self._widgets.get(widget_id)
        if existing is None:
            return None
        widget = existing.model_copy(update={
            **widget_req.model_dump(),
            "updated_at": datetime.now(timezone.utc),
        })
        self._widgets[widget_id] = widget
        return widget

    def update(self, widget_id: int, widget_update: WidgetUpdate) -> Optional[Widget]:
        existing = self._widgets.get(widget_id)
        if existing is None:
            return None

        # Extract only provided fields
        update_data = widget_update.model_dump(exclude_unset=True)
        update_data["updated_at"] = datetime.now(timezone.utc)

        widget = existing.model_copy(update=update_data)
        self._widgets[widget_id] = widget
        return widget

    def delete(self, widget_id: int) -> bool:
        if self._widgets.pop(widget_id, None) is None:
            return False
        logger.info("Deleted widget %d", widget_id)
        return True


widget_store = WidgetStore()


# -----------------------------------------------------------------------------
# Dependency
# -----------------------------------------------------------------------------
def get_widget_store() -> WidgetStore:
    """FastAPI dependency providing the process-wide widget store."""
    return widget_store
