"""
Recursive conversion of arbitrary object graphs into UBER nodes.

Each value is classified once into a Shape by walking an ordered dispatch
table of (shape, predicate, handler) entries; the first matching predicate
wins. Handlers append to the parent node they are given and recurse with a
fresh child node wherever the value nests further.
"""
from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Mapping, Sequence
from contextlib import contextmanager
from enum import Enum
from functools import lru_cache
from typing import (
    Any,
    Callable,
    Dict,
    FrozenSet,
    Iterator,
    List,
    Optional,
    Set,
    Tuple,
    Type,
    get_args,
    get_origin,
    get_type_hints,
)

from pydantic import BaseModel

from config.settings import settings
from models.hateoas import Link, Resource, Resources, ResourceSupport
from models.uber import UberDocument, UberNode
from services.links import to_uber_links
from services.scalars import DEFAULT_SINGLE_VALUE_TYPES, SingleValueTypes, to_scalar_string
from utils.exceptions import (
    CyclicGraphError,
    IntrospectionError,
    UberError,
    UnsupportedRootTypeError,
)

logger = logging.getLogger(__name__)

# Properties never rendered as data of a link-bearing resource; its links are
# already rendered as link nodes and `id` is its self link.
FILTER_RESOURCE_SUPPORT: FrozenSet[str] = frozenset({"__class__", "links", "id"})
FILTER_BEAN: FrozenSet[str] = frozenset({"__class__"})


class Shape(str, Enum):
    NONE = "none"
    SCALAR = "scalar"
    RESOURCE = "resource"
    RESOURCES = "resources"
    RESOURCE_SUPPORT = "resource_support"
    COLLECTION = "collection"
    MAPPING = "mapping"
    BEAN = "bean"


# Shapes accepted as the root of a document
ROOT_SHAPES: FrozenSet[Shape] = frozenset({
    Shape.RESOURCE,
    Shape.RESOURCES,
    Shape.RESOURCE_SUPPORT,
    Shape.COLLECTION,
    Shape.MAPPING,
})


# -----------------------------------------------------------------------------
# Introspection
# -----------------------------------------------------------------------------
@contextmanager
def _introspecting(target: Any, property_name: Optional[str] = None) -> Iterator[None]:
    """Wrap any failure of user accessor code into an IntrospectionError naming `target`."""
    try:
        yield
    except (UberError, RecursionError):
        raise
    except Exception as ex:
        raise IntrospectionError(target, property_name) from ex


def _slot_names(value_type: type) -> List[str]:
    names: List[str] = []
    for klass in reversed(value_type.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        names.extend(slot for slot in slots if slot not in ("__dict__", "__weakref__"))
    return names


def property_names(value: Any) -> List[str]:
    """
    Readable property names of an opaque object, in declaration order:
    model/dataclass fields or instance attributes first, then properties
    declared on its classes. Private names are skipped.
    """
    value_type = type(value)
    names: Dict[str, None] = {}

    if isinstance(value, BaseModel):
        names.update(dict.fromkeys(value_type.model_fields))
        names.update(dict.fromkeys(value_type.model_computed_fields))
    elif dataclasses.is_dataclass(value):
        names.update(dict.fromkeys(field.name for field in dataclasses.fields(value)))
    else:
        names.update(dict.fromkeys(getattr(value, "__dict__", {})))
        names.update(dict.fromkeys(_slot_names(value_type)))

    for klass in reversed(value_type.__mro__):
        if klass is object or klass is BaseModel:
            continue
        for name, attribute in vars(klass).items():
            if isinstance(attribute, property):
                names.setdefault(name)

    return [name for name in names if not name.startswith("_")]


def _links_annotation(value_type: Type[Any]) -> Any:
    if issubclass(value_type, BaseModel):
        field = value_type.model_fields.get("links")
        return field.annotation if field is not None else None
    try:
        return get_type_hints(value_type).get("links")
    except (NameError, TypeError):
        # unresolvable forward references: nothing is declared
        return None


@lru_cache(maxsize=None)
def declares_links(value_type: Type[Any]) -> bool:
    """
    True when `value_type` declares a `links` attribute typed as a sequence
    of Link, e.g. `links: List[Link]`. A `links` attribute of any other type
    is ordinary data.
    """
    annotation = _links_annotation(value_type)
    origin = get_origin(annotation)
    if origin is None or not isinstance(origin, type) or not issubclass(origin, Sequence):
        return False
    args = get_args(annotation)
    return bool(args) and isinstance(args[0], type) and issubclass(args[0], Link)


Handler = Callable[["UberTreeBuilder", UberNode, Any, Set[int]], None]
Predicate = Callable[["UberTreeBuilder", Any], bool]


# -----------------------------------------------------------------------------
# Tree builder
# -----------------------------------------------------------------------------
class UberTreeBuilder:
    """
    Walks an object graph depth first and appends its UBER representation
    to a parent node.

    Link-bearing wrappers are recognised by type: `Resource` and `Resources`
    take the content path, `ResourceSupport` and any class declaring
    `links: List[Link]` are rendered as links followed by their other
    properties.

    With cycle detection on, the identities of the containers on the current
    path are tracked and re-entering one raises CyclicGraphError.
    """

    def __init__(
        self,
        detect_cycles: Optional[bool] = None,
        single_value_types: SingleValueTypes = DEFAULT_SINGLE_VALUE_TYPES,
    ) -> None:
        self.detect_cycles = settings.DETECT_CYCLES if detect_cycles is None else detect_cycles
        self.single_value_types = single_value_types

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------
    def classify(self, value: Any) -> Shape:
        return self._dispatch(value)[0]

    def build(self, parent: UberNode, value: Any) -> None:
        """Append the representation of `value` to `parent.data`."""
        self._build(parent, value, set())

    def to_document(self, value: Any) -> Optional[UberDocument]:
        if value is None:
            return None
        if isinstance(value, UberDocument):
            return value

        shape = self.classify(value)
        if shape not in ROOT_SHAPES:
            raise UnsupportedRootTypeError(value)

        logger.debug("Converting %s (%s) into an UBER document", type(value).__name__, shape.value)
        root = UberNode()
        self.build(root, value)
        if root.value is not None:
            # a resource wrapping a scalar has nowhere else to put it
            root.add_data(UberNode(value=root.value))
        return UberDocument.from_nodes(root.data)

    # -------------------------------------------------------------------------
    # Shape predicates
    # -------------------------------------------------------------------------
    def _is_none(self, value: Any) -> bool:
        return value is None

    def _is_scalar(self, value: Any) -> bool:
        return type(value) in self.single_value_types

    def _is_resources(self, value: Any) -> bool:
        return isinstance(value, Resources)

    def _is_resource(self, value: Any) -> bool:
        return isinstance(value, Resource)

    def _is_resource_support(self, value: Any) -> bool:
        return isinstance(value, ResourceSupport) or declares_links(type(value))

    def _is_collection(self, value: Any) -> bool:
        return isinstance(value, Iterable) and not isinstance(
            value, (str, bytes, bytearray, Mapping, BaseModel)
        )

    def _is_mapping(self, value: Any) -> bool:
        return isinstance(value, Mapping)

    def _is_bean(self, value: Any) -> bool:
        return True

    # -------------------------------------------------------------------------
    # Recursion
    # -------------------------------------------------------------------------
    def _dispatch(self, value: Any) -> Tuple[Shape, Handler]:
        # the bean entry closes the table and matches everything
        return next(
            (shape, handler)
            for shape, predicate, handler in self._DISPATCH
            if predicate(self, value)
        )

    def _build(self, parent: UberNode, value: Any, path: Set[int]) -> None:
        shape, handler = self._dispatch(value)

        tracked = self.detect_cycles and shape not in (Shape.NONE, Shape.SCALAR)
        if not tracked:
            handler(self, parent, value, path)
            return

        key = id(value)
        if key in path:
            raise CyclicGraphError(value)
        path.add(key)
        try:
            handler(self, parent, value, path)
        finally:
            path.discard(key)

    def _build_entry(self, node: UberNode, content: Any, path: Set[int]) -> None:
        value = self.single_value_types.to_scalar_value(content)
        if value is not None:
            node.value = value
        else:
            self._build(node, content, path)

    def _add_links(self, parent: UberNode, value: Any) -> None:
        with _introspecting(value, "links"):
            links = list(value.links)
            parent.extend_data(to_uber_links(links))

    def _introspect(
        self,
        parent: UberNode,
        value: Any,
        filtered: FrozenSet[str],
        path: Set[int],
    ) -> None:
        with _introspecting(value):
            names = property_names(value)

        for name in names:
            if name in filtered:
                continue
            with _introspecting(value, name):
                content = getattr(value, name)
            property_node = parent.add_data(UberNode(name=name))
            self._build_entry(property_node, content, path)

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------
    def _skip(self, parent: UberNode, value: Any, path: Set[int]) -> None:
        return None

    def _set_scalar(self, parent: UberNode, value: Any, path: Set[int]) -> None:
        parent.value = self.single_value_types.to_scalar_value(value)

    def _build_resource(self, parent: UberNode, value: Any, path: Set[int]) -> None:
        # content is flattened into the resource's own level
        self._add_links(parent, value)
        with _introspecting(value, "content"):
            content = value.content
        self._build(parent, content, path)

    def _build_resource_support(self, parent: UberNode, value: Any, path: Set[int]) -> None:
        self._add_links(parent, value)
        self._introspect(parent, value, FILTER_RESOURCE_SUPPORT, path)

    def _build_collection(self, parent: UberNode, value: Any, path: Set[int]) -> None:
        with _introspecting(value):
            items = list(value)
        for item in items:
            item_node = parent.add_data(UberNode())
            self._build_entry(item_node, item, path)

    def _build_mapping(self, parent: UberNode, value: Any, path: Set[int]) -> None:
        with _introspecting(value):
            entries = list(value.items())
        for key, content in entries:
            entry_node = parent.add_data(UberNode(name=to_scalar_string(key)))
            self._build_entry(entry_node, content, path)

    def _build_bean(self, parent: UberNode, value: Any, path: Set[int]) -> None:
        self._introspect(parent, value, FILTER_BEAN, path)

    # Evaluated in order, first match wins
    _DISPATCH: Tuple[Tuple[Shape, Predicate, Handler], ...] = (
        (Shape.NONE, _is_none, _skip),
        (Shape.SCALAR, _is_scalar, _set_scalar),
        (Shape.RESOURCES, _is_resources, _build_resource),
        (Shape.RESOURCE, _is_resource, _build_resource),
        (Shape.RESOURCE_SUPPORT, _is_resource_support, _build_resource_support),
        (Shape.COLLECTION, _is_collection, _build_collection),
        (Shape.MAPPING, _is_mapping, _build_mapping),
        (Shape.BEAN, _is_bean, _build_bean),
    )


# -----------------------------------------------------------------------------
# Module level entry points
# -----------------------------------------------------------------------------
def to_uber_data(parent: UberNode, value: Any) -> None:
    """Recursively converts `value` to UBER nodes appended to `parent`."""
    UberTreeBuilder().build(parent, value)


def to_uber(value: Any) -> Optional[UberDocument]:
    """
    Transform an object into an UberDocument.

    Raises UnsupportedRootTypeError when the root is neither a resource,
    an iterable nor a mapping.
    """
    try:
        return UberTreeBuilder().to_document(value)
    except UberError as ex:
        logger.error("Failed to build UBER document from %s: %s", type(value).__name__, ex)
        raise
