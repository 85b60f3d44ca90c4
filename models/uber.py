from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import (
    BaseModel,
    Field,
    SerializerFunctionWrapHandler,
    field_serializer,
    field_validator,
    model_serializer,
)

from config.settings import settings
from models.hateoas import HttpMethod, Link
from utils.exceptions import UnsupportedVerbError


# -----------------------------------------------------------------------------
# Null marker
# -----------------------------------------------------------------------------
class _NullValue:
    """Marks a property whose value was literally None; renders as `"value": null`."""
    _instance: Optional["_NullValue"] = None

    def __new__(cls) -> "_NullValue":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NULL_VALUE"


NULL_VALUE = _NullValue()


# -----------------------------------------------------------------------------
# Actions
# -----------------------------------------------------------------------------
class UberAction(str, Enum):
    """UBER `action` values. READ is the implicit default and never rendered."""
    APPEND = "append"
    PARTIAL = "partial"
    READ = "read"
    REMOVE = "remove"
    REPLACE = "replace"

    @classmethod
    def for_request_method(cls, method: Union[HttpMethod, str]) -> "UberAction":
        try:
            method = HttpMethod(str(getattr(method, "value", method)).upper())
        except ValueError:
            raise UnsupportedVerbError(method)

        action = _ACTIONS_BY_METHOD.get(method)
        if action is None:
            raise UnsupportedVerbError(method.value)
        return action


_ACTIONS_BY_METHOD: Dict[HttpMethod, UberAction] = {
    HttpMethod.GET: UberAction.READ,
    HttpMethod.POST: UberAction.APPEND,
    HttpMethod.PUT: UberAction.REPLACE,
    HttpMethod.PATCH: UberAction.PARTIAL,
    HttpMethod.DELETE: UberAction.REMOVE,
}


# -----------------------------------------------------------------------------
# Nodes
# -----------------------------------------------------------------------------
# (attribute, rendered key) in wire order
_RENDER_ORDER = (
    ("id", "id"),
    ("name", "name"),
    ("label", "label"),
    ("rels", "rel"),
    ("url", "url"),
    ("templated", "templated"),
    ("action", "action"),
    ("transclude", "transclude"),
    ("model", "model"),
    ("sending", "sending"),
    ("accepting", "accepting"),
    ("value", "value"),
    ("data", "data"),
)


class UberNode(BaseModel):
    """
    A single UBER `data` element.

    A node is a link when it has both rels and a url, a scalar leaf when it
    carries a value, or a container of further nodes in `data`.
    """
    id: Optional[str] = None
    name: Optional[str] = None
    label: Optional[str] = None
    rels: List[str] = Field(default_factory=list)
    url: Optional[str] = None
    templated: bool = False
    action: UberAction = UberAction.READ
    transclude: bool = False
    model: Optional[str] = None
    sending: Optional[List[str]] = None
    accepting: Optional[List[str]] = None
    value: Any = None
    data: List["UberNode"] = Field(default_factory=list)

    @field_validator("action", mode="before")
    @classmethod
    def _parse_action(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, UberAction):
            return value.lower()
        return value

    @field_serializer("value")
    def _serialize_value(self, value: Any) -> Any:
        if value is NULL_VALUE:
            return None
        return value

    @model_serializer(mode="wrap")
    def _render(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        dumped = handler(self)
        rendered: Dict[str, Any] = {}

        for attribute, key in _RENDER_ORDER:
            current = getattr(self, attribute)

            if attribute == "action":
                if current is not UberAction.READ:
                    rendered[key] = current.value
            elif attribute == "value":
                if current is NULL_VALUE:
                    rendered[key] = None
                elif current is not None:
                    rendered[key] = dumped[attribute]
            elif isinstance(current, bool):
                # Do not render false flags
                if current:
                    rendered[key] = True
            elif isinstance(current, list):
                # Do not render empty lists
                if current:
                    rendered[key] = dumped[attribute]
            elif current is not None:
                rendered[key] = dumped[attribute]

        return rendered

    # -------------------------------------------------------------------------
    # Tree helpers
    # -------------------------------------------------------------------------
    def add_data(self, node: "UberNode") -> "UberNode":
        self.data.append(node)
        return node

    def extend_data(self, nodes: List["UberNode"]) -> None:
        self.data.extend(nodes)

    def add_rel(self, rel: str) -> None:
        if rel not in self.rels:
            self.rels.append(rel)

    def has_links(self) -> bool:
        return bool(self.rels)

    @property
    def is_link(self) -> bool:
        return self.has_links() and bool(self.url)

    def get_links(self) -> List[Link]:
        """Fetch one Link per rel of this node."""
        if not self.has_links():
            return []
        return [Link(href=self.url or "", rel=rel) for rel in self.rels]


# -----------------------------------------------------------------------------
# Document envelope
# -----------------------------------------------------------------------------
class UberErrorBody(BaseModel):
    data: List[UberNode] = Field(default_factory=list)


class UberBody(BaseModel):
    version: str = Field(default_factory=lambda: settings.UBER_VERSION)
    data: List[UberNode] = Field(default_factory=list)
    error: Optional[UberErrorBody] = None

    @model_serializer(mode="wrap")
    def _render(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        dumped = handler(self)
        rendered: Dict[str, Any] = {"version": dumped["version"]}
        if self.data:
            rendered["data"] = dumped["data"]
        if self.error is not None:
            rendered["error"] = dumped["error"]
        return rendered


class UberDocument(BaseModel):
    """`{"uber": {"version": ..., "data": [...], "error": {...}}}`"""
    uber: UberBody = Field(default_factory=UberBody)

    @classmethod
    def from_nodes(cls, nodes: List[UberNode]) -> "UberDocument":
        return cls(uber=UberBody(data=list(nodes)))

    @classmethod
    def from_error(
        cls,
        message: str,
        error_type: str,
        status_code: Optional[int] = None,
    ) -> "UberDocument":
        error_nodes = [
            UberNode(name="type", value=error_type),
            UberNode(name="message", value=message),
        ]
        if status_code is not None:
            error_nodes.append(UberNode(name="status", value=str(status_code)))
        return cls(uber=UberBody(error=UberErrorBody(data=error_nodes)))

    @property
    def data(self) -> List[UberNode]:
        return self.uber.data
