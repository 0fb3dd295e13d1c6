from datetime import datetime
from typing import List, Optional

from pydantic import Field

from storetree.models import Role
from storetree.schemas.base import CamelModel
from storetree.schemas.nodes import NodeRef


class UserBase(CamelModel):
    name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1)
    role: Role = Role.EMPLOYEE


class UserCreate(UserBase):
    password: str = Field(..., min_length=1)


class UserRegister(UserCreate):
    node_id: int


class UserUpdate(CamelModel):
    name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    role: Optional[Role] = None
    node_id: Optional[int] = None


# password_hash nunca se expone
class UserRead(UserBase):
    id: int
    node_id: int
    node: Optional[NodeRef] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- Respuestas ---

class UserResponse(CamelModel):
    user: UserRead


class UserMessageResponse(CamelModel):
    message: str
    user: UserRead


class EmployeeListResponse(CamelModel):
    employees: List[UserRead]
    count: int


class ManagerListResponse(CamelModel):
    managers: List[UserRead]
    count: int


class UserListResponse(CamelModel):
    users: List[UserRead]
    count: int
