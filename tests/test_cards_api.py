import pytest


@pytest.fixture
async def kanban(client, register, create_board):
    """Board with three "todo" cards and two "done" cards, plus its admin headers."""
    headers, _ = await register("admin@example.com")
    board = await create_board(headers)
    cards = {}
    for name, status in (("t0", "todo"), ("t1", "todo"), ("t2", "todo"), ("d0", "done"), ("d1", "done")):
        res = await client.post(
            f"/api/boards/{board['id']}/cards",
            json={"title": name, "properties": {"status": status}},
            headers=headers,
        )
        assert res.status_code == 201, res.text
        cards[name] = res.json()["card"]
    return headers, board, cards


async def _cards_by_title(client, board_id, headers):
    res = await client.get(f"/api/boards/{board_id}/cards", headers=headers)
    assert res.status_code == 200
    return {c["title"]: c for c in res.json()["cards"]}


class TestCardCrud:
    async def test_create_defaults_and_append_order(self, client, kanban):
        headers, board, cards = kanban
        assert [cards[n]["order"] for n in ("t0", "t1", "t2", "d0", "d1")] == [0, 1, 2, 3, 4]

        res = await client.post(f"/api/boards/{board['id']}/cards", json={}, headers=headers)

        card = res.json()["card"]
        assert res.status_code == 201
        assert card["title"] == "New card"
        assert card["icon"] == "📝"
        assert card["properties"] == {}
        assert card["order"] == 5

    async def test_get_update_delete(self, client, kanban):
        headers, board, cards = kanban
        url = f"/api/boards/{board['id']}/cards/{cards['t0']['id']}"

        res = await client.put(
            url,
            json={"content": "Details", "properties": {"status": "done", "priority": "high"}, "title": None},
            headers=headers,
        )
        assert res.status_code == 200
        updated = res.json()["card"]
        assert updated["content"] == "Details"
        assert updated["title"] == "t0"
        assert updated["properties"] == {"status": "done", "priority": "high"}

        res = await client.get(url, headers=headers)
        assert res.json()["card"]["content"] == "Details"

        res = await client.delete(url, headers=headers)
        assert res.status_code == 200
        res = await client.get(url, headers=headers)
        assert res.status_code == 404

    async def test_card_from_another_board_is_not_found(self, client, kanban, create_board):
        headers, _, cards = kanban
        other = await create_board(headers, "Other")

        res = await client.get(f"/api/boards/{other['id']}/cards/{cards['t0']['id']}", headers=headers)
        assert res.status_code == 404

    async def test_viewer_can_read_but_not_write(self, client, kanban, register, add_member):
        headers, board, _ = kanban
        viewer, _ = await register("viewer@example.com")
        await add_member(headers, board["id"], "viewer@example.com", "VIEWER")

        res = await client.get(f"/api/boards/{board['id']}/cards", headers=viewer)
        assert res.status_code == 200
        assert len(res.json()["cards"]) == 5

        res = await client.post(f"/api/boards/{board['id']}/cards", json={"title": "x"}, headers=viewer)
        assert res.status_code == 403


class TestReorder:
    async def test_batch_update(self, client, kanban):
        headers, board, cards = kanban

        res = await client.put(
            f"/api/boards/{board['id']}/cards-reorder",
            json={
                "cards": [
                    {"id": cards["t2"]["id"], "order": 0, "properties": {"status": "next"}},
                    {"id": cards["t0"]["id"], "order": 7},
                ]
            },
            headers=headers,
        )

        assert res.status_code == 200
        stored = await _cards_by_title(client, board["id"], headers)
        assert stored["t2"]["order"] == 0
        assert stored["t2"]["properties"] == {"status": "next"}
        assert stored["t0"]["order"] == 7
        assert stored["t0"]["properties"] == {"status": "todo"}

    async def test_unknown_id_writes_nothing(self, client, kanban):
        headers, board, cards = kanban

        res = await client.put(
            f"/api/boards/{board['id']}/cards-reorder",
            json={"cards": [{"id": cards["t0"]["id"], "order": 9}, {"id": "ghost", "order": 0}]},
            headers=headers,
        )

        assert res.status_code == 404
        assert "ghost" in res.json()["detail"]
        stored = await _cards_by_title(client, board["id"], headers)
        assert stored["t0"]["order"] == 0


class TestMove:
    async def test_cross_column_drop_renumbers_destination(self, client, kanban):
        headers, board, cards = kanban

        res = await client.post(
            f"/api/boards/{board['id']}/cards/{cards['t1']['id']}/move",
            json={"overCardId": cards["d1"]["id"]},
            headers=headers,
        )

        assert res.status_code == 200
        assert res.json()["cards"][0]["id"] == cards["t1"]["id"]
        stored = await _cards_by_title(client, board["id"], headers)
        assert stored["t1"]["properties"]["status"] == "done"
        assert [stored[n]["order"] for n in ("d0", "t1", "d1")] == [0, 1, 2]
        # Source column keeps its gap
        assert (stored["t0"]["order"], stored["t2"]["order"]) == (0, 2)

    async def test_drop_into_no_value_column(self, client, kanban):
        headers, board, cards = kanban

        res = await client.post(
            f"/api/boards/{board['id']}/cards/{cards['d0']['id']}/move",
            json={"targetGroup": "_none", "groupPropertyId": "status"},
            headers=headers,
        )

        assert res.status_code == 200
        stored = await _cards_by_title(client, board["id"], headers)
        assert "status" not in stored["d0"]["properties"]
        assert stored["d0"]["order"] == 0

    async def test_unknown_grouping_property(self, client, kanban):
        headers, board, cards = kanban

        res = await client.post(
            f"/api/boards/{board['id']}/cards/{cards['t0']['id']}/move",
            json={"targetGroup": "done", "groupPropertyId": "nope"},
            headers=headers,
        )
        assert res.status_code == 404

    async def test_missing_target(self, client, kanban):
        headers, board, cards = kanban

        res = await client.post(
            f"/api/boards/{board['id']}/cards/{cards['t0']['id']}/move", json={}, headers=headers
        )
        assert res.status_code == 400
