"""
Tests for collecting elements into the collection target.
"""

import itertools
from dataclasses import dataclass

import pytest
from hypothesis import given
from hypothesis import strategies as st

from structura import (
    ConfigurationError,
    Halt,
    PipelineFailure,
    TypeMismatchError,
    collect,
    record,
)
from structura.collectable import COLLECTORS, collector_for
from structura.schema import ContainerKind
from tests.structs import (
    CollectFrozenSet,
    CollectList,
    CollectMap,
    CollectSet,
    CollectText,
    CollectTuple,
    Full,
    Void,
)


class TestSequence:
    def test_arrival_order(self):
        assert CollectList().collect([1, 2, 3]).unwrap().into == [1, 2, 3]

    def test_appends_to_current_value(self):
        original = CollectList(into=[0])
        assert original.collect([1]).unwrap().into == [0, 1]
        assert original.into == [0]

    def test_tuple_stays_tuple(self):
        assert CollectTuple().collect("ab").unwrap().into == ("a", "b")

    def test_generator_source(self):
        outcome = CollectList().collect(i * i for i in range(4))
        assert outcome.unwrap().into == [0, 1, 4, 9]


class TestMapping:
    def test_pairs(self):
        outcome = CollectMap().collect([("a", 1), ["b", 2]])
        assert outcome.unwrap().into == {"a": 1, "b": 2}

    def test_last_write_wins(self):
        outcome = CollectMap().collect([("a", 1), ("a", 2)])
        assert outcome.unwrap().into == {"a": 2}

    @pytest.mark.parametrize("element", ["ab", 1, ("a", 1, 2), (["k"], 1)])
    def test_mismatch(self, element):
        original = CollectMap()
        outcome = original.collect([("ok", 1), element])
        assert isinstance(outcome.error, TypeMismatchError)
        assert outcome.error.details["kind"] == "mapping"
        assert original.into == {}


class TestSet:
    def test_duplicates_absorbed(self):
        outcome = CollectSet().collect([1, 2, 2, 3, 1])
        assert outcome.unwrap().into == {1, 2, 3}

    def test_frozenset_stays_frozenset(self):
        into = CollectFrozenSet().collect([1, 1]).unwrap().into
        assert into == frozenset({1})
        assert isinstance(into, frozenset)

    def test_unhashable(self):
        outcome = CollectSet().collect([1, [2]])
        assert isinstance(outcome.error, TypeMismatchError)


class TestText:
    def test_concatenation(self):
        assert CollectText().collect(["ab", "", "c"]).unwrap().into == "abc"

    def test_appends_to_current_value(self):
        assert Full(bar="x").collect(["y", "z"]).unwrap().bar == "xyz"

    def test_non_text_fragment(self):
        original = CollectText(into="a")
        outcome = original.collect(["b", 3, "c"])
        assert isinstance(outcome.error, TypeMismatchError)
        assert outcome.error.details["element"] == 3
        assert original.into == "a"


class TestHalt:
    def test_infinite_source_with_halt(self):
        def numbers():
            for i in itertools.count():
                yield Halt if i == 5 else i

        assert CollectList().collect(numbers()).unwrap().into == [0, 1, 2, 3, 4]

    def test_source_is_not_pulled_after_halt(self):
        pulled = []

        def source():
            for item in ("a", Halt, "b"):
                pulled.append(item)
                yield item

        assert CollectText().collect(source()).unwrap().into == "a"
        assert pulled == ["a", Halt]


class TestDispatch:
    def test_collectors_cover_every_kind(self):
        assert set(COLLECTORS) == set(ContainerKind)
        for kind, collector in COLLECTORS.items():
            assert collector.kind is kind

    def test_kind_follows_current_value(self):
        assert collector_for([]).kind is ContainerKind.SEQUENCE
        assert collector_for(3) is None

    def test_target_replaced_by_non_container(self):
        record = CollectList().put("into", 5).unwrap()
        outcome = record.collect([1])
        assert isinstance(outcome.error, TypeMismatchError)

    def test_module_function(self):
        assert collect(CollectList(), [1]).unwrap().into == [1]

    def test_record_rejects_final_value(self):
        @record(collectable="items")
        @dataclass(frozen=True)
        class Bounded:
            items: tuple = ()

            def __post_init__(self):
                if len(self.items) > 2:
                    raise ValueError("too many items")

        original = Bounded()
        outcome = original.collect([1, 2, 3])
        assert outcome.is_err()
        assert isinstance(outcome.error, PipelineFailure)
        assert outcome.error.message == "too many items"
        assert outcome.error.details["stage"] == "commit"
        assert original.items == ()
        assert original.collect([1, 2]).unwrap().items == (1, 2)

    def test_disabled(self):
        assert not hasattr(Void(), "collect")
        with pytest.raises(ConfigurationError, match="collectable"):
            collect(Void(), [1])


@given(elements=st.lists(st.integers()))
def test_sequence_round_trip(elements):
    assert CollectList().collect(elements).unwrap().into == elements


@given(elements=st.lists(st.integers()))
def test_set_round_trip(elements):
    assert CollectSet().collect(elements).unwrap().into == set(elements)


@given(fragments=st.lists(st.text()))
def test_text_round_trip(fragments):
    assert CollectText().collect(fragments).unwrap().into == "".join(fragments)
