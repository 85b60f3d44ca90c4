"""
Minimal RFC 6570 URI templates.

Supports the expression operators used by hypermedia links:

    {var}      simple path slot
    {+var}     reserved expansion
    {/var}     path segment
    {.var}     label
    {;var}     path-style parameter
    {?a,b}     query
    {&a}       query continuation
    {#var}     fragment

Expanding with an incomplete set of values is partial: unbound path slots are
kept verbatim in the base URI, unbound query and fragment variables drop out.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple
from urllib.parse import quote

_EXPRESSION = re.compile(r"\{([+#./;?&]?)([^{}]+)\}")
_RESERVED = ":/?#[]@!$&'()*+,;="

_QUERY_OPERATORS = ("?", "&")
_SEPARATORS = {"": ",", "+": ",", "/": "/", ".": ".", ";": ";"}


class UriTemplateComponents(NamedTuple):
    base_uri: str
    query: Optional[str] = None
    fragment: Optional[str] = None

    def __str__(self) -> str:
        uri = self.base_uri
        if self.query:
            uri += "?" + self.query
        if self.fragment:
            uri += "#" + self.fragment
        return uri


class _Token(NamedTuple):
    literal: str
    operator: str
    names: Tuple[str, ...]
    raw: str


def _variable_name(spec: str) -> str:
    # strip prefix (`:3`) and explode (`*`) modifiers
    return spec.strip().split(":", 1)[0].rstrip("*")


def _encode(value: Any, operator: str) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(_encode(item, operator) for item in value)
    safe = _RESERVED if operator in ("+", "#") else ""
    return quote(str(value), safe=safe)


class UriTemplate:

    def __init__(self, template: str) -> None:
        self.template = template
        self._tokens: List[_Token] = []

        position = 0
        for match in _EXPRESSION.finditer(template):
            operator, body = match.group(1), match.group(2)
            names = tuple(_variable_name(spec) for spec in body.split(",") if spec.strip())
            self._tokens.append(_Token(template[position:match.start()], operator, names, match.group(0)))
            position = match.end()

        if position < len(template):
            self._tokens.append(_Token(template[position:], "", (), ""))

    def __str__(self) -> str:
        return self.template

    def __repr__(self) -> str:
        return f"UriTemplate({self.template!r})"

    @property
    def variable_names(self) -> List[str]:
        """All variable names in order of first appearance."""
        seen: Dict[str, None] = {}
        for token in self._tokens:
            for name in token.names:
                seen.setdefault(name, None)
        return list(seen)

    def has_variables(self) -> bool:
        return any(token.names for token in self._tokens)

    def expand(self, values: Optional[Mapping[str, Any]] = None) -> UriTemplateComponents:
        values = values or {}
        base: List[str] = []
        query: List[str] = []
        fragment: List[str] = []
        section = "base"

        for token in self._tokens:
            section = self._add_literal(token.literal, section, base, query, fragment)
            if not token.raw:
                continue

            bound = [(name, values[name]) for name in token.names if values.get(name) is not None]

            if token.operator in _QUERY_OPERATORS:
                if section == "base":
                    section = "query"
                query.extend(f"{name}={_encode(value, token.operator)}" for name, value in bound)
            elif token.operator == "#":
                section = "fragment"
                fragment.append(",".join(_encode(value, "#") for _, value in bound))
            elif len(bound) < len(token.names):
                # unresolved slots stay in place so the result is still a template
                if section == "base":
                    base.append(token.raw)
            else:
                expanded = self._expand_path(token.operator, bound)
                if section == "base":
                    base.append(expanded)
                elif section == "query":
                    query.append(expanded)
                else:
                    fragment.append(expanded)

        return UriTemplateComponents(
            base_uri="".join(base),
            query="&".join(part for part in query if part) or None,
            fragment="".join(fragment) or None,
        )

    @staticmethod
    def _expand_path(operator: str, bound: List[Tuple[str, Any]]) -> str:
        if operator == ";":
            return "".join(f";{name}={_encode(value, operator)}" for name, value in bound)
        separator = _SEPARATORS[operator]
        joined = separator.join(_encode(value, operator) for _, value in bound)
        if operator in ("/", "."):
            return operator + joined
        return joined

    @staticmethod
    def _add_literal(
        literal: str,
        section: str,
        base: List[str],
        query: List[str],
        fragment: List[str],
    ) -> str:
        if not literal:
            return section

        if section == "base":
            head, sep, rest = literal.partition("?")
            head, hash_sep, head_fragment = head.partition("#")
            base.append(head)
            if hash_sep:
                fragment.append(head_fragment + sep + rest)
                return "fragment"
            if not sep:
                return section
            literal, section = rest, "query"

        if section == "query":
            head, sep, rest = literal.partition("#")
            query.extend(part for part in head.split("&") if part)
            if not sep:
                return section
            literal, section = rest, "fragment"

        fragment.append(literal)
        return section
