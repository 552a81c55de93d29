from typing import Literal, Optional

from app.schemas.base import CamelModel

RoleName = Literal["ADMIN", "EDITOR", "VIEWER"]

class MemberUser(CamelModel):
    id: str
    name: str
    email: str
    avatar: Optional[str] = None

class MemberRead(CamelModel):
    id: str
    user_id: str
    board_id: str
    role: RoleName
    user: Optional[MemberUser] = None

class MemberAdd(CamelModel):
    email: str
    role: RoleName = "EDITOR"

class MemberRoleUpdate(CamelModel):
    role: RoleName

class MemberResponse(CamelModel):
    member: MemberRead
