from dataclasses import dataclass

import pytest

from py_multisearch import (
    MultiPropertySearchCollection,
    SearchablePropertyEnum,
    extractor,
)


@dataclass(frozen=True)
class Thing:
    name: str
    color: str
    weight: int


class ThingProperty(SearchablePropertyEnum):
    COLOR = extractor(lambda t: t.color)
    WEIGHT = extractor(lambda t: t.weight)


class OtherProperty(SearchablePropertyEnum):
    NAME = extractor(lambda t: t.name)


A = Thing("A", "red", 1)
B = Thing("B", "blue", 1)
C = Thing("C", "red", 2)


@pytest.fixture
def collection():
    return MultiPropertySearchCollection(ThingProperty)


@pytest.fixture
def filled(collection):
    for t in (A, B, C):
        collection.add_element(t)
    return collection


def test_search_by_property(filled):
    assert filled.search_by_property(ThingProperty.COLOR, "red") == [A, C]
    assert filled.search_by_property(ThingProperty.COLOR, "blue") == [B]
    assert filled.search_by_property(ThingProperty.WEIGHT, 1) == [A, B]
    assert filled.search_by_property(ThingProperty.WEIGHT, 2) == [C]
    assert filled.contains(ThingProperty.COLOR, "green") is False
    assert filled.contains(ThingProperty.COLOR, "red") is True


def test_empty_collection(collection):
    assert collection.search_by_property(ThingProperty.COLOR, "red") == []
    assert collection.size() == 0
    assert collection.is_empty()
    assert len(collection) == 0
    assert not collection
    assert collection.collect() == []
    assert list(collection.iterator()) == []


def test_clear(filled):
    filled.clear()
    assert filled.search_by_property(ThingProperty.COLOR, "red") == []
    assert filled.search_by_property(ThingProperty.WEIGHT, 1) == []
    assert filled.contains(ThingProperty.WEIGHT, 2) is False
    assert filled.size() == 0
    assert filled.is_empty()
    assert list(filled) == []


def test_clear_restarts_slots(filled):
    filled.clear()
    filled.add_element(B)
    assert filled.search_by_property(ThingProperty.COLOR, "blue") == [B]
    assert filled._indices[ThingProperty.COLOR].slots("blue") == [0]
    assert filled.collect() == [B]


def test_unknown_property_and_value(filled):
    assert filled.search_by_property(OtherProperty.NAME, "A") == []
    assert filled.contains(OtherProperty.NAME, "A") is False
    assert filled.search_by_property("not a property", "red") == []
    assert filled.search_by_property(ThingProperty.WEIGHT, 99) == []
    # unhashable keys are simply absent
    assert filled.search_by_property(ThingProperty.COLOR, ["red"]) == []
    assert filled.contains(ThingProperty.COLOR, ["red"]) is False
    assert filled.search_by_property(["unhashable"], "red") == []
    assert filled.contains({}, "red") is False


def test_search_uses_value_equality(filled):
    assert filled.search_by_property(ThingProperty.WEIGHT, 1.0) == [A, B]
    assert filled.search_by_property(ThingProperty.COLOR, "".join(["r", "e", "d"])) == [A, C]


def test_search_returns_new_list(filled):
    res = filled.search_by_property(ThingProperty.COLOR, "red")
    res.append(B)
    assert filled.search_by_property(ThingProperty.COLOR, "red") == [A, C]


def test_size(collection):
    for i in range(10):
        collection.add_element(Thing(f"t{i}", "red", i))
        assert collection.size() == i + 1
        assert len(collection) == i + 1
        assert not collection.is_empty()

    collection.clear()
    collection.add_element(A)
    collection.add_element(A)
    assert collection.size() == 2


def test_duplicates_are_kept(collection):
    collection.add_element(A)
    collection.add_element(A)
    assert collection.search_by_property(ThingProperty.COLOR, "red") == [A, A]
    assert collection.size() == 2


def test_contains_element(filled):
    assert filled.contains_element(A)
    assert filled.contains_element(Thing("A", "red", 1))
    assert not filled.contains_element(Thing("D", "red", 1))
    assert B in filled
    assert Thing("Z", "red", 1) not in filled


def test_iteration_order(collection):
    things = [Thing(f"t{i}", ["red", "blue", "green"][i % 3], i % 4) for i in range(30)]
    collection.add_elements_many(things)

    assert list(collection) == things
    assert list(collection.iterator()) == things
    # restartable
    assert list(collection.iterator()) == things

    for color in ("red", "blue", "green"):
        expected = [t for t in things if t.color == color]
        assert collection.search_by_property(ThingProperty.COLOR, color) == expected
    for weight in range(4):
        expected = [t for t in things if t.weight == weight]
        assert collection.search_by_property(ThingProperty.WEIGHT, weight) == expected


def test_index_consistency(collection):
    things = [Thing(f"t{i}", f"c{i % 7}", i % 5) for i in range(100)]
    collection.add_elements_many(things)

    for prop in ThingProperty:
        index = collection._indices[prop]
        all_slots = [slot for _, slots in index.items() for slot in slots]
        assert sorted(all_slots) == list(range(len(things)))

        for slot, thing in enumerate(things):
            assert slot in index.slots(prop.extract(thing))
            assert thing in collection.search_by_property(prop, prop.extract(thing))


def test_initial_elements():
    col = MultiPropertySearchCollection(ThingProperty, [A, B, C])
    assert col.collect() == [A, B, C]
    assert col.search_by_property(ThingProperty.COLOR, "red") == [A, C]


def test_properties_in_declaration_order(collection):
    assert collection.properties == (ThingProperty.COLOR, ThingProperty.WEIGHT)


def test_equality():
    first = MultiPropertySearchCollection(ThingProperty, [A, B])
    second = MultiPropertySearchCollection(ThingProperty, [A, B])
    assert first == second

    second.add_element(C)
    assert first != second

    reordered = MultiPropertySearchCollection(ThingProperty, [B, A])
    assert first != reordered

    other_props = MultiPropertySearchCollection(OtherProperty, [A, B])
    assert first != other_props

    assert first != [A, B]

    first.clear()
    assert first == MultiPropertySearchCollection(ThingProperty)


def test_not_hashable(collection):
    with pytest.raises(TypeError):
        hash(collection)


def test_repr(filled):
    assert repr(filled) == "MultiPropertySearchCollection(properties=[COLOR, WEIGHT], size=3)"


def test_add_collection_to_itself(filled):
    filled.add_elements_many(filled)
    assert filled.collect() == [A, B, C, A, B, C]
    assert filled.search_by_property(ThingProperty.COLOR, "red") == [A, C, A, C]

    filled.add_elements_many(filled.iterator())
    assert filled.size() == 12
