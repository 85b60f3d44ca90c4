import pytest

from services.uri_template import UriTemplate, UriTemplateComponents


class TestVariableNames:

    def test_names_in_order_of_appearance(self):
        assert UriTemplate("/widgets/{id}{?page,size}").variable_names == ["id", "page", "size"]

    def test_modifiers_are_stripped(self):
        assert UriTemplate("/x{?a:3,list*}").variable_names == ["a", "list"]

    def test_repeated_names_are_listed_once(self):
        assert UriTemplate("/{id}/copies/{id}").variable_names == ["id"]

    def test_plain_uri_has_no_variables(self):
        template = UriTemplate("/plain/path")

        assert template.variable_names == []
        assert not template.has_variables()


class TestExpand:

    def test_unbound_expansion_keeps_path_slots_and_drops_query(self):
        components = UriTemplate("/widgets/{id}{?page,size}").expand({})

        assert components == UriTemplateComponents(base_uri="/widgets/{id}", query=None, fragment=None)

    def test_bound_expansion(self):
        components = UriTemplate("/widgets/{id}{?page,size}").expand({"id": 7, "page": 2})

        assert components.base_uri == "/widgets/7"
        assert components.query == "page=2"
        assert str(components) == "/widgets/7?page=2"

    def test_query_continuation_after_literal_query(self):
        components = UriTemplate("/search?lang=en{&q}").expand({"q": "a b"})

        assert components.base_uri == "/search"
        assert components.query == "lang=en&q=a%20b"

    def test_fragment(self):
        template = UriTemplate("/docs{#section}")

        assert template.expand({}).fragment is None
        assert template.expand({"section": "intro"}).fragment == "intro"

    def test_literal_fragment(self):
        components = UriTemplate("http://example.com/a#top").expand()

        assert components.base_uri == "http://example.com/a"
        assert components.fragment == "top"

    @pytest.mark.parametrize("template, values, expected", [
        ("/files{/name}", {"name": "a"}, "/files/a"),
        ("/files{.ext}", {"ext": "json"}, "/files.json"),
        ("/m{;x,y}", {"x": 1, "y": 2}, "/m;x=1;y=2"),
        ("{+base}/items", {"base": "http://h/x"}, "http://h/x/items"),
        ("/tags/{tag}", {"tag": ["a", "b"]}, "/tags/a,b"),
    ])
    def test_operators(self, template, values, expected):
        assert UriTemplate(template).expand(values).base_uri == expected

    def test_simple_values_are_percent_encoded(self):
        assert UriTemplate("/w/{name}").expand({"name": "a/b"}).base_uri == "/w/a%2Fb"
