from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# -----------------------------------------------------------------------------
# HTTP verbs
# -----------------------------------------------------------------------------
class HttpMethod(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"


# -----------------------------------------------------------------------------
# Links
# -----------------------------------------------------------------------------
class ActionDescriptor(BaseModel):
    """An HTTP verb paired with the URI template variables it expects."""
    http_method: HttpMethod = HttpMethod.GET
    template_variables: List[str] = Field(default_factory=list)


class Link(BaseModel):
    href: str           # absolute URL or URI template
    rel: str            # "self", "next", "collection", ...

    model_config = ConfigDict(frozen=True)


class Affordance(Link):
    """
    A link exposing several relation names and one or more actions.
    `rel` is the primary relation, `rels` all of them.
    """
    rels: List[str] = Field(default_factory=list)
    action_descriptors: List[ActionDescriptor] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _fill_rels(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        rels = data.get("rels") or []
        if "rel" not in data and rels:
            data["rel"] = rels[0]
        if not rels and "rel" in data:
            data["rels"] = [data["rel"]]
        return data


# -----------------------------------------------------------------------------
# Resource wrappers
# -----------------------------------------------------------------------------
class ResourceSupport(BaseModel):
    """Base for resources that carry their own links next to their fields."""
    links: List[Link] = Field(default_factory=list)

    @property
    def id(self) -> Optional[Link]:
        return self.get_link("self")

    def add_link(self, link: Link) -> None:
        self.links.append(link)

    def get_link(self, rel: str) -> Optional[Link]:
        for link in self.links:
            if rel == link.rel or rel in getattr(link, "rels", ()):
                return link
        return None


class Resource(BaseModel):
    """A single content item plus links."""
    content: Any = None
    links: List[Link] = Field(default_factory=list)


class Resources(BaseModel):
    """A collection of content items plus links that describe the collection."""
    content: List[Any] = Field(default_factory=list)
    links: List[Link] = Field(default_factory=list)
