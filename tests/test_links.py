"""
Tests for link aggregation, model strings and link conversion.
"""

import pytest

from models.hateoas import ActionDescriptor, Affordance, HttpMethod, Link
from models.uber import UberAction
from services.links import (
    build_model,
    get_action_descriptors,
    get_model_property,
    get_rels,
    to_uber_link,
    to_uber_links,
    url_rel_map,
)
from utils.exceptions import MissingActionDescriptorError, UnsupportedVerbError


class TestUrlRelMap:

    def test_links_sharing_a_url_are_merged(self):
        links = [
            Link(href="/a", rel="self"),
            Link(href="/a", rel="item"),
            Link(href="/b", rel="next"),
        ]

        url_rels = url_rel_map(links)

        assert list(url_rels) == ["/a", "/b"]
        assert url_rels["/a"].rels == ["self", "item"]
        assert url_rels["/b"].rels == ["next"]

    def test_repeated_rels_are_collected_once(self):
        url_rels = url_rel_map([Link(href="/a", rel="self"), Link(href="/a", rel="self")])

        assert url_rels["/a"].rels == ["self"]

    def test_affordance_contributes_all_of_its_rels(self):
        links = [
            Link(href="/a", rel="self"),
            Affordance(href="/a", rels=["item", "self", "edit"]),
        ]

        assert url_rel_map(links)["/a"].rels == ["self", "item", "edit"]

    def test_last_link_for_a_url_is_kept(self, widget_affordance):
        plain = Link(href="/widgets", rel="collection")

        url_rels = url_rel_map([plain, widget_affordance])

        assert url_rels["/widgets"].link is widget_affordance

    def test_empty_input(self):
        assert url_rel_map([]) == {}


class TestGetRels:

    def test_plain_link(self, self_link):
        assert get_rels(self_link) == ["self"]

    def test_affordance(self):
        assert get_rels(Affordance(href="/a", rels=["self", "item"])) == ["self", "item"]

    def test_affordance_defaults_rel_to_first_rel(self):
        assert Affordance(href="/a", rels=["item", "self"]).rel == "item"


class TestModelProperty:

    @pytest.mark.parametrize("variables, method, expected", [
        ([], HttpMethod.GET, None),
        (["q"], HttpMethod.GET, "{?q}"),
        (["q", "p"], HttpMethod.GET, "{?q,p}"),
        (["q"], HttpMethod.DELETE, "{?q}"),
        (["q"], HttpMethod.POST, "q={q}"),
        (["q", "p"], HttpMethod.PUT, "q={q}&p={p}"),
        (["q"], HttpMethod.PATCH, "q={q}"),
        ([], HttpMethod.POST, None),
        (["q"], HttpMethod.HEAD, None),
        (["q"], HttpMethod.OPTIONS, None),
        (["q"], "get", "{?q}"),
        (["q"], "BREW", None),
    ])
    def test_model(self, variables, method, expected):
        assert get_model_property(variables, method) == expected

    def test_build_model(self):
        assert build_model(["a", "b"], "<", "|", ">", "{name}!") == "<a!|b!>"

    def test_build_model_without_variables(self):
        assert build_model([], "{?", ",", "}", "{name}") == ""


class TestActionDescriptors:

    def test_plain_link_gets_implicit_get(self):
        descriptors = get_action_descriptors(Link(href="/widgets{?page,size}", rel="self"))

        assert len(descriptors) == 1
        assert descriptors[0].http_method == HttpMethod.GET
        assert descriptors[0].template_variables == ["page", "size"]

    def test_affordance_descriptors_are_used(self, widget_affordance):
        descriptors = get_action_descriptors(widget_affordance)

        assert [d.http_method for d in descriptors] == [HttpMethod.GET, HttpMethod.POST]

    def test_affordance_without_descriptors_gets_implicit_get(self):
        descriptors = get_action_descriptors(Affordance(href="/a", rels=["self"]))

        assert [d.http_method for d in descriptors] == [HttpMethod.GET]


class TestToUberLink:

    def test_missing_action_descriptor_is_rejected(self):
        with pytest.raises(MissingActionDescriptorError):
            to_uber_link("/widgets/1", None, ["self"])

    def test_query_template_is_described_by_model(self):
        node = to_uber_link(
            "/widgets{?q}",
            ActionDescriptor(http_method=HttpMethod.GET, template_variables=["q"]),
            ["search"],
        )

        assert node.model_dump() == {"rel": ["search"], "url": "/widgets", "model": "{?q}"}

    def test_path_variables_stay_unresolved(self):
        node = to_uber_link("/widgets/{id}", ActionDescriptor(), ["item"])

        assert node.url == "/widgets/{id}"

    def test_submission_action(self):
        node = to_uber_link(
            "/widgets",
            ActionDescriptor(http_method=HttpMethod.POST, template_variables=["name"]),
            ["create"],
        )

        assert node.action is UberAction.APPEND
        assert node.model == "name={name}"

    def test_undefined_verb_is_fatal(self):
        with pytest.raises(UnsupportedVerbError):
            to_uber_link("/widgets", ActionDescriptor(http_method=HttpMethod.HEAD), ["self"])


class TestToUberLinks:

    def test_one_node_per_action_descriptor(self, widget_affordance):
        nodes = to_uber_links([widget_affordance])

        assert [node.model_dump() for node in nodes] == [
            {"rel": ["self"], "url": "/widgets"},
            {"rel": ["self"], "url": "/widgets", "action": "append", "model": "name={name}&qty={qty}"},
        ]

    def test_nodes_do_not_share_rel_lists(self, widget_affordance):
        first, second = to_uber_links([widget_affordance])

        assert first.rels is not second.rels

    def test_merged_rels_render_once(self):
        nodes = to_uber_links([
            Link(href="/a", rel="self"),
            Link(href="/a", rel="item"),
            Link(href="/b", rel="next"),
        ])

        assert [node.model_dump() for node in nodes] == [
            {"rel": ["self", "item"], "url": "/a"},
            {"rel": ["next"], "url": "/b"},
        ]
