"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides fabricated metadata units shared across test modules.
"""

import sys
from pathlib import Path

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of docmark modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("docmark"):
        del sys.modules[module_name]

import pytest  # noqa: E402

from docmark.metadata.models import (  # noqa: E402
    OBJECT,
    ConstructorSymbol,
    EventSymbol,
    FieldSymbol,
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
EVENT_HANDLER = system("EventHandler")

ZOO_XML = """<?xml version="1.0"?>
<doc>
  <assembly><name>Zoo</name></assembly>
  <members>
    <member name="T:Zoo.Animal">
      <summary>Base type for every animal.</summary>
      <remarks>See <see cref="M:Zoo.Animal.Speak"/> and <see cref="T:Zoo.Dog"/>.</remarks>
    </member>
    <member name="M:Zoo.Animal.Speak">
      <summary>Makes a sound.</summary>
      <returns>The sound.</returns>
    </member>
    <member name="M:Zoo.Animal.Feed(System.Int32)">
      <summary>Feeds the animal.</summary>
      <param name="grams">Amount of food.</param>
    </member>
    <member name="P:Zoo.Animal.Name">
      <summary>The animal's name.</summary>
    </member>
    <member name="E:Zoo.Animal.Hungry">
      <summary>Raised when the animal gets hungry.</summary>
    </member>
    <member name="F:Zoo.Animal.Legs">
      <summary>Number of legs.</summary>
    </member>
    <member name="T:Zoo.Dog">
      <summary>A dog.</summary>
    </member>
    <member name="M:Zoo.Dog.#ctor">
      <summary>Creates a dog.</summary>
    </member>
    <member name="M:Zoo.Dog.Speak">
      <inheritdoc/>
    </member>
    <member name="P:Zoo.Dog.Name">
      <inheritdoc/>
    </member>
    <member name="M:Zoo.Dog.Fetch">
      <inheritdoc/>
    </member>
    <member name="T:Zoo.IPet">
      <summary>Something kept as a pet.</summary>
    </member>
    <member name="M:Zoo.IPet.Play">
      <summary>Plays with its owner.</summary>
    </member>
    <member name="M:Zoo.Dog.Play">
      <inheritdoc/>
    </member>
    <member name="T:Zoo.Size">
      <summary>How big an animal is.</summary>
    </member>
    <member name="F:Zoo.Size.Small">
      <summary>Fits in a bag.</summary>
    </member>
  </members>
</doc>
"""


def build_zoo(documentation: object = ZOO_XML) -> MetadataUnit:
    """Animal (documented virtual Speak), Dog : Animal, IPet (override Speak marked inherit)."""
    animal_ref = TypeRef.named("Zoo", "Animal")
    dog_ref = TypeRef.named("Zoo", "Dog")
    pet_ref = TypeRef.named("Zoo", "IPet")
    size_ref = TypeRef.named("Zoo", "Size")

    animal = TypeSymbol(
        ref=animal_ref,
        base=OBJECT,
        modifiers=frozenset({"public", "abstract"}),
        members=[
            MethodSymbol(name="Speak", return_type=STRING, modifiers=frozenset({"public", "virtual"})),
            MethodSymbol(
                name="Feed",
                parameters=[ParameterSymbol(name="grams", parameter_type=INT)],
            ),
            PropertySymbol(
                name="Name",
                property_type=STRING,
                getter=MethodSymbol(
                    name="get_Name",
                    return_type=STRING,
                    modifiers=frozenset({"public", "virtual"}),
                    is_special_name=True,
                ),
            ),
            EventSymbol(
                name="Hungry",
                handler_type=EVENT_HANDLER,
                adder=MethodSymbol(name="add_Hungry", is_special_name=True),
                remover=MethodSymbol(name="remove_Hungry", is_special_name=True),
            ),
            FieldSymbol(name="Legs", field_type=INT),
            MethodSymbol(name="ToString", return_type=STRING, modifiers=frozenset({"public", "virtual"})),
        ],
    )
    pet = TypeSymbol(
        ref=pet_ref,
        category=TypeCategory.INTERFACE,
        modifiers=frozenset({"public", "abstract"}),
        members=[MethodSymbol(name="Play", modifiers=frozenset({"public", "abstract"}))],
    )
    dog = TypeSymbol(
        ref=dog_ref,
        base=animal_ref,
        interfaces=(pet_ref,),
        members=[
            ConstructorSymbol(),
            MethodSymbol(name="Speak", return_type=STRING, modifiers=frozenset({"public", "override"})),
            MethodSymbol(name="Fetch"),
            MethodSymbol(name="Play"),
            PropertySymbol(
                name="Name",
                property_type=STRING,
                getter=MethodSymbol(
                    name="get_Name",
                    return_type=STRING,
                    modifiers=frozenset({"public", "override"}),
                    is_special_name=True,
                ),
            ),
        ],
    )
    size = TypeSymbol(
        ref=size_ref,
        category=TypeCategory.ENUM,
        base=system("Enum"),
        members=[
            FieldSymbol(
                name="Small",
                field_type=size_ref,
                is_literal=True,
                value=0,
                modifiers=frozenset({"public", "static"}),
            ),
        ],
    )
    return MetadataUnit(
        name="Zoo",
        framework=".NETStandard,Version=v2.0",
        references=("System.Runtime",),
        types=[animal, dog, pet, size],
        documentation=documentation,
    )


class Zoo:
    """Fabricated unit plus direct handles on its types."""

    def __init__(self, unit: MetadataUnit) -> None:
        self.unit = unit
        self.animal = self.type("Animal")
        self.dog = self.type("Dog")
        self.pet = self.type("IPet")
        self.size = self.type("Size")

    def type(self, name: str) -> TypeSymbol:
        return next(t for t in self.unit.types if t.name == name)

    @staticmethod
    def member(type_symbol: TypeSymbol, name: str):
        return next(m for m in type_symbol.members if m.name == name)


@pytest.fixture
def make_zoo():
    """Factory: build the zoo unit with a custom documentation source."""

    def _make(documentation: object = ZOO_XML) -> Zoo:
        return Zoo(build_zoo(documentation))

    return _make


@pytest.fixture
def zoo(make_zoo) -> Zoo:
    return make_zoo()


@pytest.fixture
def zoo_xml() -> str:
    return ZOO_XML
