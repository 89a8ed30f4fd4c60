"""Tests for tronk.model dataclasses: Card, UndoHistory, AppState, Layout."""

import dataclasses
import uuid

import pytest

from tronk.model.card import Card
from tronk.model.history import UndoHistory
from tronk.model.layout import Layout, column_count
from tronk.model.state import AppState


def test_card_defaults():
    c = Card(name="Foo")
    assert isinstance(c.id, uuid.UUID)
    assert c.description == ""
    assert c.url == ""
    assert c.tags == []
    assert c.folders == []


def test_card_is_immutable():
    c = Card(name="Foo")
    with pytest.raises(dataclasses.FrozenInstanceError):
        c.name = "Bar"


def test_card_dict_round_trip():
    c = Card(name="Foo", description="d", url="u", tags=["a"], folders=["f"])
    data = c.to_dict()
    assert data["id"] == str(c.id)
    assert Card.from_dict(data) == c


def test_card_from_dict_fills_optional_fields():
    cid = uuid.uuid4()
    c = Card.from_dict({"id": str(cid), "name": "Foo"})
    assert c.id == cid
    assert c.tags == []
    assert c.url == ""


# --- UndoHistory ---

def test_history_push_copies_the_list():
    h = UndoHistory()
    cards = [Card(name="a")]
    h.push(cards)
    cards.append(Card(name="b"))
    assert [c.name for c in h.pop()] == ["a"]


def test_history_pop_is_lifo():
    h = UndoHistory()
    h.push([])
    h.push([Card(name="a")])
    assert len(h) == 2
    assert [c.name for c in h.pop()] == ["a"]
    assert h.pop() == []
    assert not h


def test_history_pop_empty_raises():
    with pytest.raises(IndexError):
        UndoHistory().pop()


def test_history_limit_drops_oldest():
    h = UndoHistory(limit=2)
    for name in ("a", "b", "c"):
        h.push([Card(name=name)])
    assert len(h) == 2
    assert [s[0].name for s in h.snapshots] == ["b", "c"]


def test_history_rejects_bad_limit():
    with pytest.raises(ValueError):
        UndoHistory(limit=0)


# --- AppState ---

def test_replace_cards_clamps_cursor():
    s = AppState(cards=[Card(name=str(i)) for i in range(5)], cursor=4)
    s.replace_cards(s.cards[:2])
    assert s.cursor == 1
    s.replace_cards([])
    assert s.cursor is None


def test_highlighted_card():
    s = AppState(cards=[Card(name="a"), Card(name="b")], cursor=1)
    assert s.highlighted_card.name == "b"
    s.cursor = None
    assert s.highlighted_card is None


def test_tickets_increase():
    s = AppState()
    first = s.issue_ticket()
    second = s.issue_ticket()
    assert second > first
    assert s.pending_request == second
    s.cancel_pending()
    assert s.pending_request is None


def test_reset():
    s = AppState(cards=[Card(name="a")], cursor=0, system_output="x", is_modified=True)
    s.history.push([])
    s.reset()
    assert s.cards == []
    assert s.cursor is None
    assert len(s.history) == 0
    assert s.is_modified is False


# --- Layout ---

@pytest.mark.parametrize("width, expected", [
    (0, 1),
    (189, 1),
    (190, 1),
    (379, 1),
    (380, 2),
    (1000, 5),
])
def test_column_count(width, expected):
    assert column_count(width, card_width=180, spacing=10) == expected


def test_layout_from_viewport():
    layout = Layout.from_viewport(1200, 900)
    assert layout.input_station_height == 300
    assert layout.grid_width == 1180
    assert layout.columns == 6
    x, y = layout.input_station_origin()
    assert x == 1200 - 200 - 50
    assert y == 600


def test_layout_origin_never_negative():
    assert Layout.from_viewport(100, 0).input_station_origin() == (0.0, 0.0)
