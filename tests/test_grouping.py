from types import SimpleNamespace

import pytest

from app.core.errors import NotFound, ValidationError
from app.core.grouping import (
    NO_VALUE_GROUP,
    group_cards,
    pick_grouping_property,
    plan_move,
)
from app.schemas.fields import CardProperty

STATUS = CardProperty.model_validate(
    {
        "id": "status",
        "name": "Status",
        "type": "select",
        "options": [{"id": "todo", "value": "To Do"}, {"id": "done", "value": "Done"}],
    }
)


def card(card_id, group=None, order=0):
    return SimpleNamespace(
        id=card_id,
        order=order,
        properties={"status": group} if group else {},
    )


def apply(cards, entries):
    """Apply a planned batch the way the reorder endpoint does."""
    by_id = {c.id: c for c in cards}
    for entry in entries:
        by_id[entry.id].order = entry.order
        if entry.properties is not None:
            by_id[entry.id].properties = entry.properties


@pytest.fixture
def board_cards():
    return [
        card("t0", "todo", 0),
        card("t1", "todo", 1),
        card("t2", "todo", 2),
        card("d0", "done", 0),
        card("d1", "done", 1),
    ]


class TestGrouping:
    def test_columns_follow_option_order_then_no_value(self, board_cards):
        groups = group_cards(board_cards, STATUS)
        assert list(groups) == ["todo", "done", NO_VALUE_GROUP]
        assert [c.id for c in groups["todo"]] == ["t0", "t1", "t2"]

    def test_unknown_and_missing_values_land_in_no_value(self):
        cards = [card("a", "archived", 0), card("b", None, 1)]
        assert [c.id for c in group_cards(cards, STATUS)[NO_VALUE_GROUP]] == ["a", "b"]

    def test_columns_sort_by_order(self):
        cards = [card("late", "todo", 5), card("early", "todo", 1)]
        assert [c.id for c in group_cards(cards, STATUS)["todo"]] == ["early", "late"]

    def test_pick_grouping_property(self):
        props = [
            CardProperty(id="n", name="Notes", type="text"),
            CardProperty(id="s", name="Workflow status", type="text"),
            STATUS,
        ]
        assert pick_grouping_property(props).id == "s"
        assert pick_grouping_property(props[:1]) is None


class TestPlanMove:
    def test_cross_group_insert_in_the_middle(self, board_cards):
        entries = plan_move(board_cards, STATUS, "t1", over_card_id="d1")
        apply(board_cards, entries)
        by_id = {c.id: c for c in board_cards}

        assert entries[0].id == "t1"
        assert by_id["t1"].properties["status"] == "done"
        assert by_id["t1"].order == 1
        assert by_id["d0"].order == 0
        assert by_id["d1"].order == 2
        # Source column keeps its gap
        assert (by_id["t0"].order, by_id["t2"].order) == (0, 2)
        assert {e.id for e in entries} == {"t1", "d1"}

    def test_same_group_move_yields_dense_permutation(self, board_cards):
        apply(board_cards, plan_move(board_cards, STATUS, "t2", over_card_id="t0"))

        column = group_cards(board_cards, STATUS)["todo"]
        assert [c.id for c in column] == ["t2", "t0", "t1"]
        assert sorted(c.order for c in column) == [0, 1, 2]
        assert board_cards[2].properties == {"status": "todo"}

    def test_same_group_move_down_stays_dense(self, board_cards):
        apply(board_cards, plan_move(board_cards, STATUS, "t0", over_card_id="t2"))

        column = group_cards(board_cards, STATUS)["todo"]
        assert sorted(c.order for c in column) == [0, 1, 2]

    def test_drop_on_empty_area_appends(self, board_cards):
        entries = plan_move(board_cards, STATUS, "t0", target_group="done")
        assert entries[0].order == 2
        assert entries[0].properties == {"status": "done"}
        assert len(entries) == 1

    def test_move_to_no_value_removes_property(self, board_cards):
        board_cards[0].properties["notes"] = "keep me"
        entries = plan_move(board_cards, STATUS, "t0", target_group=NO_VALUE_GROUP)
        assert entries[0].properties == {"notes": "keep me"}
        assert entries[0].order == 0

    def test_unknown_card(self, board_cards):
        with pytest.raises(NotFound):
            plan_move(board_cards, STATUS, "missing", target_group="done")

    def test_unknown_drop_target(self, board_cards):
        with pytest.raises(NotFound):
            plan_move(board_cards, STATUS, "t0", over_card_id="missing")

    def test_unknown_group(self, board_cards):
        with pytest.raises(ValidationError):
            plan_move(board_cards, STATUS, "t0", target_group="blocked")

    def test_target_required(self, board_cards):
        with pytest.raises(ValidationError):
            plan_move(board_cards, STATUS, "t0")
