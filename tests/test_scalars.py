from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from uuid import UUID

import pytest

from models.uber import NULL_VALUE, UberNode
from services.scalars import (
    DEFAULT_SINGLE_VALUE_TYPES,
    SINGLE_VALUE_TYPES,
    SingleValueTypes,
    get_content_as_scalar_value,
    is_single_value_type,
)
from services.tree import Shape, UberTreeBuilder


class Color(str, Enum):
    RED = "red"


class Priority(Enum):
    HIGH = 1


class Money:
    def __str__(self):
        return "EUR 5"


class TestScalarClassification:

    @pytest.mark.parametrize("content, expected", [
        ("bolt", "bolt"),
        (5, "5"),
        (1.5, "1.5"),
        (True, "true"),
        (False, "false"),
        (Decimal("1.10"), "1.10"),
        (datetime(2024, 1, 2, 3, 4, 5), "2024-01-02T03:04:05"),
        (datetime(2024, 1, 2, tzinfo=timezone.utc), "2024-01-02T00:00:00+00:00"),
        (date(2024, 1, 2), "2024-01-02"),
        (UUID("12345678-1234-5678-1234-567812345678"), "12345678-1234-5678-1234-567812345678"),
        (Color.RED, "red"),
        (Priority.HIGH, "1"),
    ])
    def test_single_value_types_render_as_strings(self, content, expected):
        assert get_content_as_scalar_value(content) == expected

    def test_none_is_the_null_marker(self):
        assert get_content_as_scalar_value(None) is NULL_VALUE

    @pytest.mark.parametrize("content", [[1], (1,), {"a": 1}, set(), object()])
    def test_containers_are_not_scalar(self, content):
        assert get_content_as_scalar_value(content) is None


class TestSingleValueTypes:

    def test_default_types_are_a_constant_set(self):
        assert isinstance(SINGLE_VALUE_TYPES, frozenset)
        assert all(value_type in DEFAULT_SINGLE_VALUE_TYPES for value_type in SINGLE_VALUE_TYPES)

    def test_subclasses_of_registered_types_are_scalar(self):
        assert is_single_value_type(Color)
        assert is_single_value_type(bool)

    def test_register_returns_a_new_registry(self):
        registry = DEFAULT_SINGLE_VALUE_TYPES.register(Money)

        assert Money in registry
        assert Money not in DEFAULT_SINGLE_VALUE_TYPES
        assert not is_single_value_type(Money)
        assert registry.to_scalar_value(Money()) == "EUR 5"

    def test_registry_only_holds_what_it_was_given(self):
        registry = SingleValueTypes([Money])

        assert Money in registry
        assert str not in registry

    def test_builder_uses_its_own_registry(self):
        builder = UberTreeBuilder(single_value_types=DEFAULT_SINGLE_VALUE_TYPES.register(Money))
        root = UberNode()

        builder.build(root, {"price": Money()})

        assert builder.classify(Money()) is Shape.SCALAR
        assert UberTreeBuilder().classify(Money()) is Shape.BEAN
        assert root.model_dump()["data"] == [{"name": "price", "value": "EUR 5"}]
