from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from storetree import directory
from storetree.database import get_db
from storetree.models import User
from storetree.schemas.auth import Token, RegisterResponse
from storetree.schemas.users import UserRegister, UserResponse
from storetree.security import create_user_token, get_current_user

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(user_in: UserRegister, db: Session = Depends(get_db)):
    user = directory.register_user(
        db,
        name=user_in.name,
        last_name=user_in.last_name,
        username=user_in.username,
        password=user_in.password,
        node_id=user_in.node_id,
        role=user_in.role,
    )
    return {
        "message": "User registered successfully",
        "user": user,
        "token": create_user_token(user),
    }


# Estandar OAuth2: los campos llegan como formulario 'username' y 'password'
@router.post("/login", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    user = directory.authenticate(db, form_data.username, form_data.password)
    return {"access_token": create_user_token(user), "token_type": "bearer", "user": user}


@router.get("/me", response_model=UserResponse)
def read_me(current_user: User = Depends(get_current_user)):
    return {"user": current_user}
