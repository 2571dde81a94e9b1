import pytest

from civil_exam_cbt.services.answer_store import AnswerStore


def test_select_sets_answer():
    store = AnswerStore()
    assert store.select(1, 3) == 3
    assert store.get(1) == 3
    assert store.answered_count == 1


def test_select_same_option_toggles_off():
    store = AnswerStore()
    store.select(5, 2)
    assert store.select(5, 2) is None
    assert 5 not in store
    assert store.answered_count == 0


def test_select_twice_returns_to_pre_call_state():
    store = AnswerStore()
    store.select(1, 2)
    before = dict(store.snapshot())
    store.select(7, 1)
    store.select(7, 1)
    assert dict(store.snapshot()) == before


def test_select_other_option_twice_clears_question():
    store = AnswerStore()
    store.select(2, 4)
    store.select(2, 1)
    store.select(2, 1)
    assert store.get(2) is None


def test_select_replaces_other_option():
    store = AnswerStore()
    store.select(3, 1)
    store.select(3, 4)
    assert store.get(3) == 4
    assert store.answered_count == 1


def test_reset_clears_all():
    store = AnswerStore()
    for q in range(1, 6):
        store.select(q, 1)
    store.reset()
    assert store.answered_count == 0


def test_snapshot_is_immutable_copy():
    store = AnswerStore()
    store.select(1, 2)
    snap = store.snapshot()
    store.select(1, 3)
    assert snap[1] == 2
    with pytest.raises(TypeError):
        snap[1] = 4


def test_load_replaces_contents():
    store = AnswerStore()
    store.select(1, 1)
    store.load({2: 3, 4: 1})
    assert dict(store.snapshot()) == {2: 3, 4: 1}
