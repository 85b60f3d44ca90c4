from fastapi import Request
from typing import List

from models.hateoas import (
    ActionDescriptor,
    Affordance,
    HttpMethod,
    Link,
    Resource,
    Resources,
    ResourceSupport,
)
from models.widget import Widget


WIDGET_FIELDS = ["name", "qty"]


# -----------------------------------------------------------------------------
# Widget HATEOAS
# -----------------------------------------------------------------------------
def build_widget_links(request: Request, widget: Widget) -> List[Link]:
    return [
        Affordance(
            href=str(request.url_for("get_widget", widget_id=widget.id)),
            rels=["self"],
            action_descriptors=[
                ActionDescriptor(http_method=HttpMethod.GET),
                ActionDescriptor(http_method=HttpMethod.PUT, template_variables=WIDGET_FIELDS),
                ActionDescriptor(http_method=HttpMethod.PATCH, template_variables=WIDGET_FIELDS),
                ActionDescriptor(http_method=HttpMethod.DELETE),
            ],
        ),
        Link(
            href=str(request.url_for("list_widgets")),
            rel="collection",
        ),
    ]

def hateoas_widget(request: Request, widget: Widget) -> Resource:
    return Resource(content=widget, links=build_widget_links(request, widget))


# -----------------------------------------------------------------------------
# Widget collection HATEOAS
# -----------------------------------------------------------------------------
def build_widget_collection_links(request: Request) -> List[Link]:
    collection_url = str(request.url_for("list_widgets"))
    return [
        Affordance(
            href=collection_url,
            rels=["self"],
            action_descriptors=[
                ActionDescriptor(http_method=HttpMethod.GET),
                ActionDescriptor(http_method=HttpMethod.POST, template_variables=WIDGET_FIELDS),
            ],
        ),
        # templated; rendered with model {?search,skip,limit}
        Link(
            href=collection_url + "{?search,skip,limit}",
            rel="search",
        ),
    ]

def hateoas_widgets(request: Request, widgets: List[Widget]) -> Resources:
    return Resources(
        content=[hateoas_widget(request, widget) for widget in widgets],
        links=build_widget_collection_links(request),
    )


# -----------------------------------------------------------------------------
# API root
# -----------------------------------------------------------------------------
def hateoas_root(request: Request) -> ResourceSupport:
    return ResourceSupport(
        links=[
            Link(href=str(request.url_for("root")), rel="self"),
            Link(href=str(request.url_for("list_widgets")), rel="widgets"),
        ]
    )
