"""
Shared fixtures for the UBER rendering test suite.
"""

import pytest
from fastapi.testclient import TestClient

from main import app
from models.hateoas import ActionDescriptor, Affordance, HttpMethod, Link
from services.widgets import WidgetStore, get_widget_store


@pytest.fixture
def self_link():
    return Link(href="/widgets/1", rel="self")


@pytest.fixture
def widget_affordance():
    """The same URL reachable with GET and POST."""
    return Affordance(
        href="/widgets",
        rels=["self"],
        action_descriptors=[
            ActionDescriptor(http_method=HttpMethod.GET),
            ActionDescriptor(http_method=HttpMethod.POST, template_variables=["name", "qty"]),
        ],
    )


@pytest.fixture
def widget_store():
    return WidgetStore()


@pytest.fixture
def client(widget_store):
    app.dependency_overrides[get_widget_store] = lambda: widget_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
