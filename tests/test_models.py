"""Tests for core data models."""

from types import SimpleNamespace

import pytest

from exemplars.errors import DeclarationError
from exemplars.models import (
    ABSENT,
    GeneratorDeclaration,
    GeneratorDescriptor,
    PresenceRule,
    StrategyKind,
    ValidationContext,
    validates_presence_of,
)


class TestGeneratorDescriptor:
    """Tests for descriptor sequence state."""

    def test_block_without_initial_value_gets_none(self):
        seen = []
        descriptor = GeneratorDescriptor(
            attribute="foo",
            kind=StrategyKind.BLOCK,
            block=lambda prev: seen.append(prev) or "x",
        )
        descriptor.next_value(SimpleNamespace)
        descriptor.next_value(SimpleNamespace)

        assert seen == [None, "x"]
        assert descriptor.last_value == "x"

    def test_initial_value_returned_first(self):
        descriptor = GeneratorDescriptor(
            attribute="n",
            kind=StrategyKind.BLOCK,
            block=lambda prev: prev * 2,
            initial_value=3,
        )
        assert [descriptor.next_value(SimpleNamespace) for _ in range(3)] == [3, 6, 12]

    def test_none_is_a_valid_initial_value(self):
        descriptor = GeneratorDescriptor(
            attribute="n",
            kind=StrategyKind.BLOCK,
            block=lambda prev: "next",
            initial_value=None,
        )
        assert descriptor.has_initial_value
        assert descriptor.next_value(SimpleNamespace) is None

    def test_reset(self):
        descriptor = GeneratorDescriptor(
            attribute="n", kind=StrategyKind.BLOCK, block=lambda prev: prev + 1, initial_value=0,
        )
        descriptor.next_value(SimpleNamespace)
        descriptor.reset()
        assert descriptor.last_value is ABSENT

    def test_method_strategy(self):
        owner = type("Owner", (), {"make": classmethod(lambda cls: cls.__name__)})
        descriptor = GeneratorDescriptor(attribute="n", kind=StrategyKind.METHOD, method="make")
        assert descriptor.next_value(owner) == "Owner"
        assert descriptor.last_value is ABSENT

    def test_summary(self):
        descriptor = GeneratorDescriptor(attribute="t", kind=StrategyKind.METHOD, method="make")
        assert descriptor.summary == "method make()"


class TestGeneratorDeclaration:
    """Tests for the exemplar declaration format."""

    def test_round_trip(self):
        data = {"start": "a", "sequence": "succ"}
        declaration = GeneratorDeclaration.from_dict("name", data)
        assert declaration.to_dict() == data

    def test_scalar_shorthand(self):
        declaration = GeneratorDeclaration.from_dict("color", "red")
        assert declaration.start == "red"
        assert declaration.sequence is None

    def test_missing_spec(self):
        with pytest.raises(DeclarationError):
            GeneratorDeclaration.from_dict("color", None)

    def test_unknown_keys(self):
        with pytest.raises(DeclarationError, match="colour"):
            GeneratorDeclaration.from_dict("color", {"colour": "red"})


class TestPresenceRule:
    """Tests for presence rules and their contexts."""

    def test_context_from_string(self):
        assert PresenceRule("title", on="create").on is ValidationContext.CREATE

    @pytest.mark.parametrize("context,applies", [
        (ValidationContext.ALWAYS, True),
        (ValidationContext.CREATE, True),
        (ValidationContext.UPDATE, False),
    ])
    def test_applies_on_create(self, context, applies):
        assert PresenceRule("x", on=context).applies_on_create is applies

    def test_validates_presence_of(self):
        rules = validates_presence_of("a", "b", on="create", message="can't be blank")
        assert [r.attribute for r in rules] == ["a", "b"]
        assert all(r.message == "can't be blank" for r in rules)

    def test_invalid_context(self):
        with pytest.raises(ValueError):
            PresenceRule("x", on="sometimes")
