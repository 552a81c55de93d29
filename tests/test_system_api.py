async def test_health_without_queue(client):
    res = await client.get("/api/health")
    assert res.status_code == 200
    assert res.json() == {
        "api": "ok",
        "database": "connected",
        "redis": "not configured",
        "worker": "not configured",
    }


async def test_stats(client, register, create_board):
    headers, _ = await register("stats@example.com")
    board = await create_board(headers)
    await client.post(f"/api/boards/{board['id']}/cards", json={"title": "A"}, headers=headers)

    res = await client.get("/api/system/stats")

    assert res.status_code == 200
    assert res.json() == {"users": 1, "boards": 1, "cards": 1, "views": 1, "files": 0}
