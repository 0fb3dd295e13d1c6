from pydantic import BaseModel

from storetree.schemas.users import UserRead


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


class RegisterResponse(BaseModel):
    message: str
    user: UserRead
    token: str
