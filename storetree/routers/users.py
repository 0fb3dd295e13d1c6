from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from storetree import directory
from storetree.database import get_db
from storetree.permissions import Actor
from storetree.schemas.nodes import MessageResponse
from storetree.schemas.users import (
    EmployeeListResponse, ManagerListResponse, UserCreate, UserListResponse,
    UserMessageResponse, UserResponse, UserUpdate,
)
from storetree.security import get_current_actor

router = APIRouter()


# --- 1. LISTADOS POR NODO ---
@router.get("/{node_id}/employees", response_model=EmployeeListResponse)
def read_employees(
    node_id: int,
    include_descendants: bool = Query(False, alias="includeDescendants"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor)
):
    employees = directory.list_employees(db, actor, node_id, include_descendants)
    return {"employees": employees, "count": len(employees)}


@router.get("/{node_id}/managers", response_model=ManagerListResponse)
def read_managers(
    node_id: int,
    include_descendants: bool = Query(False, alias="includeDescendants"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor)
):
    managers = directory.list_managers(db, actor, node_id, include_descendants)
    return {"managers": managers, "count": len(managers)}


@router.get("/{node_id}/users", response_model=UserListResponse)
def read_users(
    node_id: int,
    include_descendants: bool = Query(False, alias="includeDescendants"),
    # Texto libre: solo se valida si el actor es manager
    role: Optional[str] = None,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor)
):
    # Para empleados el filtro de rol se ignora (siempre 'employee')
    users = directory.list_users(db, actor, node_id, include_descendants, role)
    return {"users": users, "count": len(users)}


# --- 2. CREAR USUARIO EN UN NODO ---
@router.post("/{node_id}/users", response_model=UserMessageResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    node_id: int,
    user_in: UserCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor)
):
    user = directory.create_user(
        db, actor, node_id,
        name=user_in.name,
        last_name=user_in.last_name,
        username=user_in.username,
        password=user_in.password,
        role=user_in.role,
    )
    return {"message": "User created successfully", "user": user}


# --- 3. LEER / ACTUALIZAR / ELIMINAR POR ID ---
@router.get("/users/{user_id}", response_model=UserResponse)
def read_user(user_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return {"user": directory.get_user(db, actor, user_id)}


@router.put("/users/{user_id}", response_model=UserMessageResponse)
def update_user(
    user_id: int,
    user_in: UserUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor)
):
    """
    Actualiza nombre, apellido, username, rol o nodo. Mover a otro nodo exige
    que el destino este dentro del alcance del actor.
    """
    user = directory.update_user(
        db, actor, user_id,
        name=user_in.name,
        last_name=user_in.last_name,
        username=user_in.username,
        role=user_in.role,
        node_id=user_in.node_id,
    )
    return {"message": "User updated successfully", "user": user}


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(user_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    directory.delete_user(db, actor, user_id)
    return {"message": "User deleted successfully"}
