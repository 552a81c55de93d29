from pydantic import BaseModel

class SystemStats(BaseModel):
    users: int
    boards: int
    cards: int
    views: int
    files: int
