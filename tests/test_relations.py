from types import SimpleNamespace

from rollcall.core.relations import single_related


def test_single_value_passes_through():
    row = SimpleNamespace(name="Math")
    assert single_related(row) is row


def test_list_takes_first():
    a, b = object(), object()
    assert single_related([a, b]) is a
    assert single_related((b,)) is b


def test_empty_and_none():
    assert single_related([]) is None
    assert single_related(None) is None
