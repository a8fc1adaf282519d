"""Tests for the hierarchy graph: overrides, interfaces, symbol table."""

from __future__ import annotations

from docmark.metadata.hierarchy import HierarchyGraph
from docmark.metadata.models import (
    OBJECT,
    MetadataUnit,
    MethodSymbol,
    ParameterSymbol,
    PropertySymbol,
    TypeCategory,
    TypeRef,
    TypeSymbol,
    system,
)

INT = system("Int32")
STRING = system("String")


def _generic_unit() -> MetadataUnit:
    """Shelf<T> with virtual Put(T); IntShelf : Shelf<int> overrides Put(int)."""
    t = TypeRef.type_parameter(0)
    shelf_ref = TypeRef.named("Store", "Shelf`1", t)
    shelf = TypeSymbol(
        ref=shelf_ref,
        base=OBJECT,
        members=[
            MethodSymbol(
                name="Put",
                modifiers=frozenset({"public", "virtual"}),
                parameters=[ParameterSymbol(name="item", parameter_type=t)],
            ),
        ],
    )
    comparer_ref = TypeRef.named("Store", "IComparer`1", t)
    comparer = TypeSymbol(
        ref=comparer_ref,
        category=TypeCategory.INTERFACE,
        members=[
            MethodSymbol(
                name="Compare",
                return_type=INT,
                modifiers=frozenset({"public", "abstract"}),
                parameters=[
                    ParameterSymbol(name="x", parameter_type=t),
                    ParameterSymbol(name="y", parameter_type=t),
                ],
            ),
        ],
    )
    int_shelf = TypeSymbol(
        ref=TypeRef.named("Store", "IntShelf"),
        base=shelf_ref.construct(INT),
        interfaces=(comparer_ref.construct(INT),),
        members=[
            MethodSymbol(
                name="Put",
                modifiers=frozenset({"public", "override"}),
                parameters=[ParameterSymbol(name="item", parameter_type=INT)],
            ),
            MethodSymbol(
                name="Compare",
                return_type=INT,
                parameters=[
                    ParameterSymbol(name="x", parameter_type=INT),
                    ParameterSymbol(name="y", parameter_type=INT),
                ],
            ),
        ],
    )
    return MetadataUnit(name="Store", types=[shelf, comparer, int_shelf])


class TestSymbolTable:
    """Canonical id -> symbol lookups."""

    def test_finds_types_and_members(self, zoo) -> None:
        # Given
        graph = HierarchyGraph.build([zoo.unit])

        # When
        dog = graph.find_symbol("T:Zoo.Dog")
        speak = graph.find_symbol("M:Zoo.Animal.Speak")

        # Then
        assert dog is zoo.dog
        assert speak is zoo.member(zoo.animal, "Speak")

    def test_events_found_with_and_without_tag(self, zoo) -> None:
        graph = HierarchyGraph.build([zoo.unit])
        hungry = zoo.member(zoo.animal, "Hungry")

        assert graph.find_symbol("Zoo.Animal.Hungry") is hungry
        assert graph.find_symbol("E:Zoo.Animal.Hungry") is hungry

    def test_unknown_id_is_none(self, zoo) -> None:
        graph = HierarchyGraph.build([zoo.unit])

        assert graph.find_symbol("T:Nowhere.Missing") is None

    def test_find_type_unwraps_arrays(self, zoo) -> None:
        graph = HierarchyGraph.build([zoo.unit])

        assert graph.find_type(zoo.dog.ref.array()) is zoo.dog
        assert graph.find_type(TypeRef.type_parameter(0)) is None


class TestOverrideRoot:
    """Override chains are precomputed at build time."""

    def test_given_override_when_root_then_base_virtual(self, zoo) -> None:
        # Given
        graph = HierarchyGraph.build([zoo.unit])
        dog_speak = zoo.member(zoo.dog, "Speak")

        # When
        root = graph.override_root(dog_speak)

        # Then
        assert root is zoo.member(zoo.animal, "Speak")

    def test_given_non_override_when_root_then_itself(self, zoo) -> None:
        graph = HierarchyGraph.build([zoo.unit])
        fetch = zoo.member(zoo.dog, "Fetch")

        assert graph.override_root(fetch) is fetch

    def test_given_three_level_chain_when_root_then_first_virtual(self, zoo) -> None:
        # Given: Puppy : Dog overrides Speak again
        puppy = TypeSymbol(
            ref=TypeRef.named("Zoo", "Puppy"),
            base=zoo.dog.ref,
            members=[MethodSymbol(name="Speak", return_type=STRING, modifiers=frozenset({"public", "override"}))],
        )
        zoo.unit.add(puppy)

        # When
        graph = HierarchyGraph.build([zoo.unit])

        # Then
        assert graph.override_root(puppy.members[0]) is zoo.member(zoo.animal, "Speak")

    def test_accessor_override_root(self, zoo) -> None:
        graph = HierarchyGraph.build([zoo.unit])
        dog_name = zoo.member(zoo.dog, "Name")
        animal_name = zoo.member(zoo.animal, "Name")

        assert graph.override_root(dog_name.getter) is animal_name.getter
        assert graph.property_of(animal_name.getter) is animal_name

    def test_generic_base_substitutes_arguments(self) -> None:
        # Given
        unit = _generic_unit()
        graph = HierarchyGraph.build([unit])
        shelf, _, int_shelf = unit.types

        # When
        root = graph.override_root(int_shelf.members[0])

        # Then
        assert root is shelf.members[0]


class TestInterfaces:
    """Interface enumeration and dispatch maps."""

    def test_interface_methods_matched_by_signature(self, zoo) -> None:
        graph = HierarchyGraph.build([zoo.unit])

        matches = graph.interface_methods(zoo.member(zoo.dog, "Play"))

        assert matches == [zoo.member(zoo.pet, "Play")]

    def test_no_interface_member_when_signature_differs(self, zoo) -> None:
        graph = HierarchyGraph.build([zoo.unit])

        assert graph.interface_methods(zoo.member(zoo.dog, "Fetch")) == []

    def test_constructed_interface_substitutes_arguments(self) -> None:
        unit = _generic_unit()
        graph = HierarchyGraph.build([unit])
        _, comparer, int_shelf = unit.types

        matches = graph.interface_methods(int_shelf.members[1])

        assert matches == [comparer.members[0]]

    def test_dispatch_map_is_cached(self) -> None:
        unit = _generic_unit()
        graph = HierarchyGraph.build([unit])
        interface_ref = unit.types[2].interfaces[0]

        assert graph.interface_dispatch(interface_ref) is graph.interface_dispatch(interface_ref)

    def test_all_interfaces_include_inherited(self, zoo) -> None:
        # Given: Puppy : Dog declares no interfaces of its own
        puppy = TypeSymbol(ref=TypeRef.named("Zoo", "Puppy"), base=zoo.dog.ref)
        zoo.unit.add(puppy)
        graph = HierarchyGraph.build([zoo.unit])

        # When
        interfaces = graph.all_interfaces(puppy)

        # Then
        assert interfaces == [zoo.pet.ref]

    def test_all_interfaces_deduplicated(self, zoo) -> None:
        puppy = TypeSymbol(ref=TypeRef.named("Zoo", "Puppy"), base=zoo.dog.ref, interfaces=(zoo.pet.ref,))
        zoo.unit.add(puppy)
        graph = HierarchyGraph.build([zoo.unit])

        assert graph.all_interfaces(puppy) == [zoo.pet.ref]


class TestInherits:
    """Inherits list used by syntax lines and type documents."""

    def test_object_base_skipped(self, zoo) -> None:
        graph = HierarchyGraph.build([zoo.unit])

        assert graph.inherits(zoo.animal) == []

    def test_base_then_interfaces(self, zoo) -> None:
        graph = HierarchyGraph.build([zoo.unit])

        assert graph.inherits(zoo.dog) == [zoo.animal.ref, zoo.pet.ref]

    def test_value_type_base_skipped(self, zoo) -> None:
        graph = HierarchyGraph.build([zoo.unit])

        assert graph.inherits(zoo.size) == []

    def test_property_named_finds_by_simple_name(self, zoo) -> None:
        graph = HierarchyGraph.build([zoo.unit])
        name = zoo.member(zoo.animal, "Name")

        assert isinstance(name, PropertySymbol)
        assert graph.property_named(zoo.animal, "Zoo.IPet.Name") is name
        assert graph.property_named(None, "Name") is None
