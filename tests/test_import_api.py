from sqlalchemy import func, select

from app.db.models import Board
from tests.archives import STATUS_PROPERTY, board_record, build_archive, card_record, flip_byte


def _upload(data, filename="export.boardarchive"):
    return {"file": (filename, data, "application/zip")}


async def test_import_returns_summary(client, register):
    headers, _ = await register("importer@example.com")
    data = build_archive(
        [
            board_record("Imported", [STATUS_PROPERTY]),
            card_record("c1", "Task A", {"p1": "o1"}),
            card_record("c2", "Task B"),
            "{broken",
        ],
        files={"board-1/a1/diagram.png": b"png-bytes"},
    )

    res = await client.post("/api/import/archive", files=_upload(data), headers=headers)

    assert res.status_code == 201, res.text
    body = res.json()
    assert body["message"] == "Board imported"
    assert body["boardTitle"] == "Imported"
    assert body["cardsImported"] == 2
    assert body["viewsImported"] == 1
    assert body["filesImported"] == 1
    assert [s["line"] for s in body["skipped"]] == [4]

    res = await client.get(f"/api/boards/{body['boardId']}", headers=headers)
    board = res.json()["board"]
    assert board["members"][0]["role"] == "ADMIN"
    assert [c["title"] for c in board["cards"]] == ["Task A", "Task B"]

    res = await client.get(f"/api/boards/{body['boardId']}/files", headers=headers)
    files = res.json()["files"]
    assert [(f["filename"], f["mimetype"], f["size"]) for f in files] == [("diagram.png", "image/png", 9)]
    assert files[0]["path"] == f"/uploads/{body['boardId']}/diagram.png"


async def test_missing_file_field(client, register):
    headers, _ = await register("importer@example.com")
    res = await client.post("/api/import/archive", headers=headers)
    assert res.status_code == 400


async def test_wrong_extension(client, register):
    headers, _ = await register("importer@example.com")
    data = build_archive([board_record()])

    res = await client.post("/api/import/archive", files=_upload(data, "export.zip"), headers=headers)

    assert res.status_code == 400
    assert ".boardarchive" in res.json()["detail"]


async def test_oversized_upload(client, register, monkeypatch, db):
    headers, _ = await register("importer@example.com")
    monkeypatch.setattr("app.api.routes.imports.MAX_IMPORT_BYTES", 64)
    data = build_archive([board_record()])
    assert len(data) > 64

    res = await client.post("/api/import/archive", files=_upload(data), headers=headers)

    assert res.status_code == 413
    assert (await db.execute(select(func.count()).select_from(Board))).scalar() == 0


async def test_invalid_archive_creates_nothing(client, register, db):
    headers, _ = await register("importer@example.com")
    data = build_archive([board_record()], marker=False)

    res = await client.post("/api/import/archive", files=_upload(data), headers=headers)

    assert res.status_code == 400
    assert "version.json" in res.json()["detail"]
    assert (await db.execute(select(func.count()).select_from(Board))).scalar() == 0


async def test_requires_authentication(client):
    res = await client.post("/api/import/archive", files=_upload(build_archive([board_record()])))
    assert res.status_code == 401


async def test_damaged_archive_is_a_client_error(client, register, db):
    headers, _ = await register("importer@example.com")
    data = flip_byte(build_archive([board_record("T")]), b'"title": "T"')

    res = await client.post("/api/import/archive", files=_upload(data), headers=headers)

    assert res.status_code == 400
    assert "unreadable" in res.json()["detail"]
    assert (await db.execute(select(func.count()).select_from(Board))).scalar() == 0


async def test_attachment_folder_before_board_directory(client, register):
    headers, _ = await register("importer@example.com")
    data = build_archive(
        [board_record("Late")],
        leading_files={"assets/logo.png": b"png"},
    )

    res = await client.post("/api/import/archive", files=_upload(data), headers=headers)

    assert res.status_code == 201, res.text
    assert res.json()["boardTitle"] == "Late"
    assert res.json()["filesImported"] == 1
