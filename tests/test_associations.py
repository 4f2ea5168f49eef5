"""Tests for auto-populating required belongs-to associations."""

from unittest.mock import Mock, patch

import pytest

from exemplars import (
    AssociationResolver,
    BelongsTo,
    DeclaredMetadata,
    ExemplarConfig,
    GenerationEngine,
    Record,
    configure,
    get_engine,
    required_relations,
    validates_presence_of,
)
from exemplars.relational import presence_validated_attributes, resolve_class


class Foo(Record):
    pass


class Bar(Record):
    pass


class Thing(Record):
    pass


class Owner:
    """Related class without the generation capability."""

    def __init__(self, **attributes):
        self.__dict__.update(attributes)


class Frobnitz(Record):
    __belongs_to__ = [
        BelongsTo("foo", Foo),
        BelongsTo("bar", Bar),
        BelongsTo("thing", "Thing"),
    ]
    __validations__ = [
        *validates_presence_of("foo"),
        *validates_presence_of("thing_id"),
        *validates_presence_of("name"),
        *validates_presence_of("title", on="create", message="can't be blank"),
    ]


class Gizmo(Record):
    __belongs_to__ = [BelongsTo("bar", Bar), BelongsTo("owner", Owner)]
    __validations__ = [
        *validates_presence_of("bar", on="update"),
        *validates_presence_of("owner"),
    ]


class TestRequiredRelations:
    """Tests for deriving required relations from presence rules."""

    @pytest.fixture
    def metadata(self):
        return DeclaredMetadata()

    def test_required_by_name_and_foreign_key(self, metadata):
        names = [r.name for r in required_relations(Frobnitz, metadata)]
        assert names == ["foo", "thing"]

    def test_update_only_rules_are_ignored(self, metadata):
        names = [r.name for r in required_relations(Gizmo, metadata)]
        assert names == ["owner"]

    def test_presence_validated_attributes_ignore_options(self):
        assert Frobnitz.presence_validated_attributes() == ["foo", "thing_id", "name", "title"]

    def test_presence_validated_attributes_deduplicated(self, metadata):
        cls = type("Dup", (Record,), {
            "__validations__": validates_presence_of("a", "b") + validates_presence_of("a", on="create"),
        })
        assert presence_validated_attributes(cls, metadata) == ["a", "b"]

    def test_default_foreign_key(self):
        assert BelongsTo("thing", Thing).foreign_key == "thing_id"
        assert BelongsTo("thing", Thing, foreign_key="thing_ref").attributes == ["thing", "thing_ref"]

    def test_has_metadata(self, metadata):
        assert metadata.has_metadata(Frobnitz)
        assert not metadata.has_metadata(Owner)

    def test_resolve_class_by_name(self):
        assert resolve_class("Thing", Frobnitz) is Thing
        assert resolve_class(Thing) is Thing
        assert resolve_class("test_associations:Thing") is Thing

    def test_resolve_class_unknown(self):
        with pytest.raises(LookupError):
            resolve_class("Nope", Frobnitz)


class TestAssociationGeneration:
    """Tests for generation of required associations."""

    def test_generates_relation_required_by_name(self):
        with patch.object(Foo, "generate", return_value=Foo()) as generate:
            frobnitz = Frobnitz.generate()

        generate.assert_called_once_with()
        assert frobnitz.foo is generate.return_value

    def test_generates_relation_required_by_foreign_key(self):
        with patch.object(Thing, "generate", return_value=Thing()) as generate:
            frobnitz = Frobnitz.generate()

        generate.assert_called_once_with()
        assert frobnitz.thing is generate.return_value

    def test_does_not_generate_unrequired_relation(self):
        with patch.object(Bar, "generate") as generate:
            frobnitz = Frobnitz.generate()

        generate.assert_not_called()
        assert frobnitz.bar is None

    def test_uses_specified_relation(self):
        foo = Foo()
        with patch.object(Foo, "generate") as generate:
            frobnitz = Frobnitz.generate(foo=foo)

        generate.assert_not_called()
        assert frobnitz.foo is foo

    def test_specified_foreign_key_satisfies_relation(self):
        with patch.object(Thing, "generate") as generate:
            frobnitz = Frobnitz.generate(thing_id=42)

        generate.assert_not_called()
        assert frobnitz.thing_id == 42
        assert frobnitz.thing is None

    def test_uses_specified_values_without_generators(self):
        assert Frobnitz.generate(name="test").name == "test"

    def test_related_generators_apply(self):
        Foo.generator_for("label", start="foo-a", block=lambda prev: prev + "!")
        assert Frobnitz.generate().foo.label == "foo-a"

    def test_generated_relation_satisfies_resolution(self):
        Frobnitz.generator_for("foo", block=lambda prev: "from generator")
        with patch.object(Foo, "generate") as generate:
            frobnitz = Frobnitz.generate()

        generate.assert_not_called()
        assert frobnitz.foo == "from generator"

    def test_standalone_engine_generates_related_records(self):
        engine = GenerationEngine(loader=Mock(**{"apply.return_value": 0}))
        engine.register(Foo, "label", start="x", block=lambda prev: prev)

        frobnitz = engine.generate(Frobnitz)

        assert frobnitz.foo.label == "x"
        assert len(get_engine().registry(Foo)) == 0

    def test_related_class_with_own_factory(self):
        class Custom(Record):
            @classmethod
            def generate(cls, overrides=None, **kwargs):
                return "custom"

        cls = type("WithCustom", (Record,), {
            "__belongs_to__": [BelongsTo("custom", Custom)],
            "__validations__": validates_presence_of("custom"),
        })
        assert cls.generate().custom == "custom"

    def test_related_class_without_generate_uses_engine(self):
        gizmo = Gizmo.generate()
        assert isinstance(gizmo.owner, Owner)
        assert gizmo.bar is None

    def test_relations_resolved_in_declaration_order(self, engine):
        attributes = engine.attributes_for(Frobnitz)
        assert [k for k in attributes if k in ("foo", "thing")] == ["foo", "thing"]

    def test_resolver_skips_classes_without_metadata(self):
        resolver = AssociationResolver(DeclaredMetadata(), GenerationEngine())
        assert resolver.resolve(Owner, {}, {}) == {}

    def test_rules_read_on_every_call(self):
        cls = type("Late", (Record,), {"__belongs_to__": [BelongsTo("foo", Foo)]})
        assert cls.generate().foo is None

        cls.__validations__ = validates_presence_of("foo")
        assert isinstance(cls.generate().foo, Foo)


class TestRecord:
    """Tests for the Record base."""

    def test_exemplar_path_under_project_root(self, tmp_path):
        assert Frobnitz.exemplar_path() == tmp_path / "tests" / "exemplars"

    def test_configured_exemplar_path(self, tmp_path):
        custom = tmp_path / "custom"
        custom.mkdir()
        configure(ExemplarConfig(project_root=tmp_path, exemplar_path=custom))
        (custom / "foo_exemplar.yaml").write_text("generators:\n  label: hello\n")

        assert Foo.exemplar_path() == custom
        assert Foo.generate().label == "hello"

    def test_unset_relations_default_to_none(self):
        frobnitz = Frobnitz(name="x")
        assert frobnitz.foo is None
        assert frobnitz.name == "x"

    def test_repr(self):
        assert repr(Foo(a=1)) == "Foo(a=1)"

    def test_exemplar_for_record(self, tmp_path):
        directory = tmp_path / "tests" / "exemplars"
        directory.mkdir(parents=True)
        (directory / "frobnitz_exemplar.yaml").write_text(
            "generators:\n  name: {start: frob-a, sequence: succ}\n  title: Mr\n"
        )

        frobnitz = Frobnitz.generate()
        assert frobnitz.name == "frob-a"
        assert frobnitz.title == "Mr"
        assert isinstance(frobnitz.foo, Foo)
