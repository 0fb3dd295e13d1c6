from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storetree.exceptions import Conflict, NotFound
from storetree.models import User, Role


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def username_taken(db: Session, username: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(User.id).filter(User.username == username)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def list_users(db: Session, node_ids: Iterable[int], role: Optional[Role] = None) -> List[User]:
    ids = list(node_ids)
    query = db.query(User).filter(User.node_id.in_(ids))
    if role is not None:
        query = query.filter(User.role == role)
    return query.order_by(User.id).all()


def _commit_user(db: Session, user: User) -> User:
    # El rollback expira el objeto: guardar los valores pedidos antes
    username, user_id = user.username, user.id
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        # Otra peticion registro el mismo username entre la verificacion y el commit
        if username_taken(db, username, exclude_id=user_id):
            raise Conflict("Username already exists")
        raise
    db.refresh(user)
    return user


def create_user(
    db: Session,
    *,
    name: str,
    last_name: str,
    username: str,
    password_hash: str,
    node_id: int,
    role: Role = Role.EMPLOYEE,
) -> User:
    username = username.strip()
    if username_taken(db, username):
        raise Conflict("Username already exists")

    user = User(
        name=name,
        last_name=last_name,
        username=username,
        password_hash=password_hash,
        role=role,
        node_id=node_id,
    )
    db.add(user)
    return _commit_user(db, user)


def save_user(db: Session, user: User) -> User:
    return _commit_user(db, user)


def delete_user(db: Session, user: User) -> None:
    db.delete(user)
    db.commit()
