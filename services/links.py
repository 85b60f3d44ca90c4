from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from models.hateoas import ActionDescriptor, HttpMethod
from models.uber import UberAction, UberNode
from services.uri_template import UriTemplate
from utils.exceptions import MissingActionDescriptorError

logger = logging.getLogger(__name__)

_RETRIEVAL_METHODS = (HttpMethod.GET, HttpMethod.DELETE)
_SUBMISSION_METHODS = (HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH)


# -----------------------------------------------------------------------------
# Link aggregation
# -----------------------------------------------------------------------------
@dataclass
class LinkAndRels:
    """Holds a link together with every rel collected for its URL."""
    link: Any = None
    rels: List[str] = field(default_factory=list)

    def add_rel(self, rel: str) -> None:
        if rel not in self.rels:
            self.rels.append(rel)


def get_rels(link: Any) -> List[str]:
    rels = getattr(link, "rels", None)
    if rels:
        return list(rels)
    return [link.rel]


def url_rel_map(links: Iterable[Any]) -> Dict[str, LinkAndRels]:
    """
    Turn a list of links into a map from URL to the link and ALL of its rels,
    in the order the URLs were first seen.
    """
    url_rels: Dict[str, LinkAndRels] = {}

    for link in links:
        link_and_rels = url_rels.setdefault(link.href, LinkAndRels())
        link_and_rels.link = link
        for rel in get_rels(link):
            link_and_rels.add_rel(rel)

    return url_rels


# -----------------------------------------------------------------------------
# Actions and models
# -----------------------------------------------------------------------------
def get_action_descriptors(link: Any) -> List[Any]:
    """Declared action descriptors, or a single implicit GET over the href's variables."""
    descriptors = getattr(link, "action_descriptors", None)
    if descriptors:
        return list(descriptors)
    return [
        ActionDescriptor(
            http_method=HttpMethod.GET,
            template_variables=UriTemplate(link.href).variable_names,
        )
    ]


def build_model(
    variable_names: Sequence[str],
    prefix: str,
    separator: str,
    suffix: str,
    parameter_template: str,
) -> str:
    if not variable_names:
        return ""

    parameters = [parameter_template.format(name=variable) for variable in variable_names]
    return prefix + separator.join(parameters) + suffix


def get_model_property(
    variable_names: Sequence[str],
    http_method: Union[HttpMethod, str],
) -> Optional[str]:
    """
    GET/DELETE describe their parameters as a query template (`{?a,b}`),
    POST/PUT/PATCH as a form body (`a={a}&b={b}`). Other verbs have no model.
    """
    try:
        method = HttpMethod(str(getattr(http_method, "value", http_method)).upper())
    except ValueError:
        return None

    if method in _RETRIEVAL_METHODS:
        model = build_model(variable_names, "{?", ",", "}", "{name}")
    elif method in _SUBMISSION_METHODS:
        model = build_model(variable_names, "", "&", "", "{name}={{{name}}}")
    else:
        model = None

    return model or None


# -----------------------------------------------------------------------------
# Conversion to UBER links
# -----------------------------------------------------------------------------
def to_uber_link(href: str, action_descriptor: Any, rels: Sequence[str]) -> UberNode:
    """
    Converts a single link into an UBER node.

    The url is the href expanded without any bound variables; what the
    template expects is described by the node's model instead.
    """
    if action_descriptor is None:
        raise MissingActionDescriptorError(href)

    http_method = action_descriptor.http_method
    return UberNode(
        rels=list(rels),
        url=UriTemplate(href).expand({}).base_uri,
        action=UberAction.for_request_method(http_method),
        model=get_model_property(list(action_descriptor.template_variables), http_method),
    )


def to_uber_links(links: Iterable[Any]) -> List[UberNode]:
    """One UBER link node per distinct URL and action descriptor."""
    uber_links: List[UberNode] = []

    for href, link_and_rels in url_rel_map(links).items():
        for action_descriptor in get_action_descriptors(link_and_rels.link):
            uber_links.append(to_uber_link(href, action_descriptor, link_and_rels.rels))

    logger.debug("Converted links into %d UBER link nodes", len(uber_links))
    return uber_links
