"""Tests for inherited documentation resolution."""

from __future__ import annotations

from structlog.testing import capture_logs

from docmark.index.resolver import InheritanceResolver
from docmark.index.store import DocumentationRegistry
from docmark.metadata.hierarchy import HierarchyGraph
from docmark.metadata.models import (
    MetadataUnit,
    MethodSymbol,
    TypeCategory,
    TypeRef,
    TypeSymbol,
)

LOOP_XML = """<doc><members>
  <member name="M:Loop.IFirst.Run"><inheritdoc/></member>
  <member name="M:Loop.ISecond.Run"><inheritdoc/></member>
  <member name="M:Loop.Runner.Run"><inheritdoc/></member>
</members></doc>"""


DIAMOND_XML = """<doc><members>
  <member name="M:Kite.IBase.Fly"><inheritdoc/></member>
  <member name="M:Kite.ILeft.Fly"><inheritdoc/></member>
  <member name="M:Kite.IRight.Fly"><inheritdoc/></member>
  <member name="M:Kite.Kite.Fly"><inheritdoc/></member>
</members></doc>"""


def _resolver(*units: MetadataUnit) -> InheritanceResolver:
    return InheritanceResolver(DocumentationRegistry(units), HierarchyGraph.build(units))


def _loop_unit() -> MetadataUnit:
    """IFirst and ISecond extend each other; Runner implements IFirst."""
    first_ref = TypeRef.named("Loop", "IFirst")
    second_ref = TypeRef.named("Loop", "ISecond")

    def interface(ref: TypeRef, extends: TypeRef) -> TypeSymbol:
        return TypeSymbol(
            ref=ref,
            category=TypeCategory.INTERFACE,
            interfaces=(extends,),
            members=[MethodSymbol(name="Run", modifiers=frozenset({"public", "abstract"}))],
        )

    runner = TypeSymbol(
        ref=TypeRef.named("Loop", "Runner"),
        interfaces=(first_ref,),
        members=[MethodSymbol(name="Run")],
    )
    return MetadataUnit(
        name="Loop",
        types=[interface(first_ref, second_ref), interface(second_ref, first_ref), runner],
        documentation=LOOP_XML,
    )


def _diamond_unit() -> MetadataUnit:
    """ILeft and IRight both extend IBase; Kite implements ILeft and IRight."""
    base_ref = TypeRef.named("Kite", "IBase")
    left_ref = TypeRef.named("Kite", "ILeft")
    right_ref = TypeRef.named("Kite", "IRight")

    def interface(ref: TypeRef, *extends: TypeRef) -> TypeSymbol:
        return TypeSymbol(
            ref=ref,
            category=TypeCategory.INTERFACE,
            interfaces=extends,
            members=[MethodSymbol(name="Fly", modifiers=frozenset({"public", "abstract"}))],
        )

    kite = TypeSymbol(
        ref=TypeRef.named("Kite", "Kite"),
        interfaces=(left_ref, right_ref),
        members=[MethodSymbol(name="Fly")],
    )
    return MetadataUnit(
        name="Kite",
        types=[interface(base_ref), interface(left_ref, base_ref), interface(right_ref, base_ref), kite],
        documentation=DIAMOND_XML,
    )


class TestResolveDirect:
    """Nodes that do not defer come back unchanged."""

    def test_documented_member_returned_directly(self, zoo) -> None:
        resolver = _resolver(zoo.unit)
        speak = zoo.member(zoo.animal, "Speak")

        node = resolver.resolve(speak)

        assert node is not None
        assert node.get("name") == "M:Zoo.Animal.Speak"

    def test_undocumented_member_is_none_without_warning(self, zoo) -> None:
        resolver = _resolver(zoo.unit)

        with capture_logs() as logs:
            node = resolver.resolve(zoo.member(zoo.animal, "ToString"))

        assert node is None
        assert not [e for e in logs if e["log_level"] == "warning"]


class TestResolveInherited:
    """Deferred nodes walk overrides, then interfaces."""

    def test_given_override_when_resolve_then_base_node(self, zoo) -> None:
        # Given
        resolver = _resolver(zoo.unit)
        dog_speak = zoo.member(zoo.dog, "Speak")

        # When
        node = resolver.resolve(dog_speak)

        # Then
        assert node is not None
        assert node.get("name") == "M:Zoo.Animal.Speak"
        assert node.findtext("summary") == "Makes a sound."

    def test_given_interface_implementation_when_resolve_then_interface_node(self, zoo) -> None:
        resolver = _resolver(zoo.unit)

        node = resolver.resolve(zoo.member(zoo.dog, "Play"))

        assert node is not None
        assert node.findtext("summary") == "Plays with its owner."

    def test_given_overriding_property_when_resolve_then_base_property(self, zoo) -> None:
        resolver = _resolver(zoo.unit)

        node = resolver.resolve(zoo.member(zoo.dog, "Name"))

        assert node is not None
        assert node.get("name") == "P:Zoo.Animal.Name"

    def test_given_no_ancestor_when_resolve_then_none_and_warns(self, zoo) -> None:
        # Given
        resolver = _resolver(zoo.unit)

        # When
        with capture_logs() as logs:
            node = resolver.resolve(zoo.member(zoo.dog, "Fetch"))

        # Then
        assert node is None
        warnings = [e for e in logs if e["event"] == "inheritdoc_unresolved"]
        assert warnings
        assert warnings[0]["key"] == "M:Zoo.Dog.Fetch"

    def test_given_three_levels_when_resolve_then_walks_to_root(self, make_zoo, zoo_xml) -> None:
        # Given: Puppy : Dog, both defer
        xml = zoo_xml.replace(
            "</members>",
            '<member name="M:Zoo.Puppy.Speak"><inheritdoc/></member></members>',
        )
        zoo = make_zoo(xml)
        puppy = TypeSymbol(
            ref=TypeRef.named("Zoo", "Puppy"),
            base=zoo.dog.ref,
            members=[MethodSymbol(name="Speak", modifiers=frozenset({"public", "override"}))],
        )
        zoo.unit.add(puppy)
        resolver = _resolver(zoo.unit)

        # When
        node = resolver.resolve(puppy.members[0])

        # Then
        assert node is not None
        assert node.findtext("summary") == "Makes a sound."

    def test_parameter_nodes_are_direct(self, zoo) -> None:
        resolver = _resolver(zoo.unit)
        grams = zoo.member(zoo.animal, "Feed").parameters[0]

        node = resolver.resolve(grams)

        assert node is not None
        assert node.text == "Amount of food."


class TestResolveFailures:
    """Cycles and unsupported kinds degrade to a warning."""

    def test_given_interface_cycle_when_resolve_then_none_and_warns(self) -> None:
        # Given
        unit = _loop_unit()
        resolver = _resolver(unit)
        runner_run = unit.types[2].members[0]

        # When
        with capture_logs() as logs:
            node = resolver.resolve(runner_run)

        # Then
        assert node is None
        assert any(e["event"] == "inheritdoc_cycle" for e in logs)

    def test_given_deferred_type_when_resolve_then_node_kept_and_warns(self, make_zoo) -> None:
        # Given
        xml = "<doc><members><member name='T:Zoo.Dog'><inheritdoc/></member></members></doc>"
        zoo = make_zoo(xml)
        resolver = _resolver(zoo.unit)

        # When
        with capture_logs() as logs:
            node = resolver.resolve(zoo.dog)

        # Then
        assert node is not None
        assert node.get("name") == "T:Zoo.Dog"
        assert any(e["event"] == "inheritdoc_unsupported_kind" for e in logs)

    def test_custom_defer_tag(self, make_zoo) -> None:
        xml = (
            "<doc><members>"
            "<member name='M:Zoo.Animal.Speak'><summary>Base.</summary></member>"
            "<member name='M:Zoo.Dog.Speak'><inherit/></member>"
            "</members></doc>"
        )
        zoo = make_zoo(xml)
        units = [zoo.unit]
        resolver = InheritanceResolver(
            DocumentationRegistry(units),
            HierarchyGraph.build(units),
            defer_tag="inherit",
        )

        node = resolver.resolve(zoo.member(zoo.dog, "Speak"))

        assert node is not None
        assert node.findtext("summary") == "Base."

    def test_given_shared_base_interface_when_unresolved_then_not_a_cycle(self) -> None:
        # Given: two interface paths reach IBase, nothing has content
        unit = _diamond_unit()
        resolver = _resolver(unit)
        kite_fly = unit.types[3].members[0]

        # When
        with capture_logs() as logs:
            node = resolver.resolve(kite_fly)

        # Then
        assert node is None
        events = [e["event"] for e in logs if e["log_level"] == "warning"]
        assert events == ["inheritdoc_unresolved"]
