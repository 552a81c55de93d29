from app.db.models.user import User
from app.db.models.board import Board
from app.db.models.board_member import BoardMember
from app.db.models.card import Card
from app.db.models.view import View
from app.db.models.file import File

__all__ = ["User", "Board", "BoardMember", "Card", "View", "File"]
