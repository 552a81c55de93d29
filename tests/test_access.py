import pytest

from app.core.access import ADMINS, ANY_MEMBER, EDITORS, Role, authorize, require_board
from app.core.errors import NotFound, PermissionDenied
from app.db.models import Board, BoardMember, User


@pytest.fixture
async def board(db, user):
    board = Board(title="Gate", created_by_id=user.id)
    db.add(board)
    await db.flush()
    db.add(BoardMember(user_id=user.id, board_id=board.id, role=Role.EDITOR.value))
    await db.commit()
    return board


async def test_role_sets(db, user, board):
    assert await authorize(db, user.id, board.id, ANY_MEMBER)
    assert await authorize(db, user.id, board.id, EDITORS)
    assert not await authorize(db, user.id, board.id, ADMINS)


async def test_role_names_are_accepted(db, user, board):
    assert await authorize(db, user.id, board.id, ["EDITOR"])


async def test_non_member_is_denied(db, board):
    stranger = User(email="stranger@example.com", name="S", password_hash="x")
    db.add(stranger)
    await db.commit()
    assert not await authorize(db, stranger.id, board.id, ANY_MEMBER)


async def test_require_board(db, user, board):
    assert (await require_board(db, user.id, board.id, EDITORS)).id == board.id

    with pytest.raises(PermissionDenied, match="admins only"):
        await require_board(db, user.id, board.id, ADMINS, "admins only")

    with pytest.raises(NotFound):
        await require_board(db, user.id, "missing", ANY_MEMBER)
