# ==============================================
# Tests for TypeModel
# ==============================================
#
# Discovery lifecycle, lookups, specialization and error handling.
# ==============================================

import threading
import time
from typing import Optional

import pytest

from docmap.errors import TypeMappingError, TypeParameterMismatchError
from docmap.model import DiscoveryState, FieldModel, TypeModel

from sample_types import (
    AbstractShape,
    Box,
    BrokenField,
    BrokenMethod,
    Greeter,
    IntKeyed,
    NeedsArgs,
    Pair,
    Person,
    StrPair,
    Unordered,
)


@pytest.fixture
def pair_model(registry, introspector):
    return TypeModel(registry, introspector, Pair)


# ==============================================
# Construction
# ==============================================

class TestConstruction:
    def test_discovery_is_deferred(self, registry, introspector):
        model = TypeModel(registry, introspector, Person)
        assert model.discovered is False
        assert model.state is DiscoveryState.UNINITIALIZED
        assert introspector.calls == 0
        assert model.get_fields() == []

    def test_name_from_type(self, registry, introspector):
        assert TypeModel(registry, introspector, Person).name == "Person"
        assert TypeModel(registry, introspector, Pair[str, int]).name == "Pair"

    def test_required_constructor_argument_rejected(self, registry, introspector):
        with pytest.raises(TypeMappingError, match="NeedsArgs"):
            TypeModel(registry, introspector, NeedsArgs)
        assert introspector.calls == 0

    def test_abstract_class_rejected(self, registry, introspector):
        with pytest.raises(TypeMappingError, match="abstract"):
            TypeModel(registry, introspector, AbstractShape)

    def test_non_class_rejected(self, registry, introspector):
        with pytest.raises(TypeMappingError):
            TypeModel(registry, introspector, Optional[int])


# ==============================================
# Discovery
# ==============================================

class TestDiscovery:
    def test_discover_populates_fields_and_methods(self, pair_model):
        pair_model.discover()
        assert pair_model.discovered is True
        assert [f.name for f in pair_model.get_fields()] == ["first", "second"]
        assert len(pair_model.get_methods("swap")) == 1

    def test_discover_is_idempotent(self, pair_model, introspector):
        pair_model.discover()
        fields = pair_model.get_fields()
        methods = pair_model.get_methods("swap")

        pair_model.discover()

        assert introspector.calls == 1
        assert [id(f) for f in pair_model.get_fields()] == [id(f) for f in fields]
        assert [id(m) for m in pair_model.get_methods("swap")] == [id(m) for m in methods]

    def test_fields_in_name_order(self, registry, introspector):
        model = TypeModel(registry, introspector, Unordered)
        model.discover()
        assert [f.name for f in model.get_fields()] == ["alpha", "mid", "zeta"]
        assert list(model.fields) == ["alpha", "mid", "zeta"]

    def test_unknown_method_gives_empty_list(self, pair_model):
        pair_model.discover()
        methods = pair_model.get_methods("does_not_exist")
        assert methods is not None
        assert methods == []

    def test_overloads_in_discovery_order(self, registry, introspector):
        model = TypeModel(registry, introspector, Greeter)
        model.discover()
        overloads = model.get_methods("greet")
        assert [m.parameter_types for m in overloads] == [[str], [int]]
        assert all(m.is_overload for m in overloads)

    def test_type_parameters_recorded(self, pair_model):
        pair_model.discover()
        assert [p.__name__ for p in pair_model.type_parameters] == ["A", "B"]
        assert pair_model.bound_type_arguments == {}

    def test_parameterized_instantiation_binds_arguments(self, registry, introspector):
        model = TypeModel(registry, introspector, Pair[str, int])
        model.discover()
        assert model.bound_type_arguments == {"A": str, "B": int}
        assert model.resolve_generic_type("A") is str
        assert model.get_field("first").type is str
        assert model.get_field("second").type is int

    def test_subclass_of_parameterized_base(self, registry, introspector):
        model = TypeModel(registry, introspector, StrPair)
        model.discover()
        assert model.get_field("first").type is str
        assert model.get_field("second").type is int
        assert model.get_field("first").declared_type.__name__ == "A"

    def test_bindings_flow_through_intermediate_generic(self, registry, introspector):
        model = TypeModel(registry, introspector, IntKeyed)
        model.discover()
        assert model.get_field("first").type is str
        assert model.get_field("second").type is int

    def test_failed_method_aborts_discovery(self, registry, introspector):
        model = TypeModel(registry, introspector, BrokenMethod)

        with pytest.raises(TypeMappingError) as excinfo:
            model.discover()

        assert isinstance(excinfo.value.cause, NameError)
        assert excinfo.value.__cause__ is excinfo.value.cause
        assert "MissingType" in str(excinfo.value)
        assert model.discovered is False
        assert model.state is DiscoveryState.UNINITIALIZED
        assert model.get_methods("compute") == []

    def test_failed_discovery_can_be_retried(self, registry, introspector):
        model = TypeModel(registry, introspector, BrokenMethod)
        for _ in range(2):
            with pytest.raises(TypeMappingError):
                model.discover()
        assert introspector.calls == 2

    def test_unresolvable_field_annotation(self, registry, introspector):
        model = TypeModel(registry, introspector, BrokenField)
        with pytest.raises(TypeMappingError, match="AlsoMissing"):
            model.discover()
        assert model.get_fields() == []

    def test_concurrent_first_discovery_runs_once(self, registry, introspector):
        original = introspector.resolve_members

        def slow_resolve(tp, inclusion):
            time.sleep(0.05)
            return original(tp, inclusion)

        introspector.resolve_members = slow_resolve
        model = TypeModel(registry, introspector, Person)
        threads = [threading.Thread(target=model.discover) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert model.discovered is True
        assert introspector.calls == 1
        assert len(model.get_fields()) == 6


# ==============================================
# Fields & collection name
# ==============================================

class TestMutation:
    def test_add_field_replaces_discovered(self, pair_model):
        pair_model.discover()
        original = pair_model.get_field("first")
        replacement = FieldModel(
            pair_model, pair_model.registry, "first", declared_type=bytes, resolved_type=bytes
        )

        pair_model.add_field(replacement)

        assert pair_model.get_field("first") is replacement
        assert pair_model.get_field("first") is not original
        assert len(pair_model.get_fields()) == 2

    def test_add_field_inserts_new(self, pair_model):
        pair_model.discover()
        pair_model.add_field(
            FieldModel(pair_model, pair_model.registry, "extra", declared_type=int, resolved_type=int)
        )
        assert [f.name for f in pair_model.get_fields()] == ["extra", "first", "second"]

    def test_collection_name_priority(self, pair_model):
        assert pair_model.get_collection_name() is None
        pair_model.set_collection_name(0, "pair")
        pair_model.set_collection_name(10, "pairs")
        pair_model.set_collection_name(5, "ignored")
        assert pair_model.get_collection_name() == "pairs"


# ==============================================
# Specialization
# ==============================================

class TestSpecialization:
    def test_binds_fields(self, pair_model):
        specialized = TypeModel.specialize(pair_model, [str, int])

        assert len(specialized.get_fields()) == 2
        assert specialized.get_field("first").type is str
        assert specialized.get_field("second").type is int
        assert specialized.bound_type_arguments == {"A": str, "B": int}
        assert specialized.type == Pair[str, int]
        assert specialized.discovered is True

    def test_forces_template_discovery(self, pair_model):
        assert pair_model.discovered is False
        TypeModel.specialize(pair_model, [str, int])
        assert pair_model.discovered is True

    def test_template_untouched(self, pair_model):
        TypeModel.specialize(pair_model, [str, int])
        assert pair_model.get_field("first").type.__name__ == "A"
        assert pair_model.bound_type_arguments == {}

    def test_field_count_matches_template(self, pair_model):
        pair_model.discover()
        specialized = TypeModel.specialize(pair_model, [bytes, float])
        assert len(specialized.get_fields()) == len(pair_model.get_fields())

    def test_fields_owned_by_specialized_model(self, pair_model):
        specialized = TypeModel.specialize(pair_model, [str, int])
        assert all(f.owner is specialized for f in specialized.get_fields())

    def test_nested_generic_substitution(self, registry, introspector):
        template = TypeModel(registry, introspector, Box)
        specialized = TypeModel.specialize(template, [int])
        assert specialized.get_field("items").type == list[int]
        assert specialized.get_field("maybe").type == Optional[int]

    def test_shares_collaborators_and_collection_name(self, pair_model):
        specialized = TypeModel.specialize(pair_model, [str, int])
        assert specialized.registry is pair_model.registry
        assert specialized.introspector is pair_model.introspector
        assert specialized.collection_name is pair_model.collection_name

        pair_model.set_collection_name(1, "pairs")
        assert specialized.get_collection_name() == "pairs"

    def test_too_few_arguments(self, pair_model):
        with pytest.raises(TypeParameterMismatchError) as excinfo:
            TypeModel.specialize(pair_model, [str])
        assert excinfo.value.expected == 2
        assert excinfo.value.actual == 1
        assert isinstance(excinfo.value, TypeMappingError)

    def test_too_many_arguments(self, pair_model):
        with pytest.raises(TypeParameterMismatchError):
            TypeModel.specialize(pair_model, [str, int, float])

    def test_non_generic_with_no_arguments(self, registry, introspector):
        template = TypeModel(registry, introspector, Person)
        specialized = TypeModel.specialize(template, [])
        assert [f.name for f in specialized.get_fields()] == [f.name for f in template.get_fields()]

    def test_methods_owned_by_specialized_model(self, pair_model):
        specialized = TypeModel.specialize(pair_model, [str, int])
        swap = specialized.get_methods("swap")
        assert len(swap) == 1
        assert swap[0].owner is specialized
        assert pair_model.get_methods("swap")[0].owner is pair_model

    def test_bound_template_rejected(self, registry, introspector):
        bound = TypeModel(registry, introspector, Pair[str, int])
        with pytest.raises(TypeMappingError, match="already bound"):
            TypeModel.specialize(bound, [bytes, float])
        assert bound.discovered is False
