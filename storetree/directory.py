"""
Directorio de nodos y usuarios.

Cada operacion sigue el mismo flujo: resolver el objetivo en el almacen,
consultar ``storetree.permissions`` y solo con ALLOW leer o mutar. Un DENY
se evalua siempre antes de cualquier escritura.

Orden de errores: una entidad inexistente da ``NotFound``; una existente pero
fuera de alcance da ``Forbidden``, nunca ``NotFound``.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from storetree.crud import ancestry, nodes as node_store, users as user_store
from storetree.exceptions import Conflict, InvalidArgument, NotFound, Unauthenticated
from storetree.models import Node, Role, User
from storetree import permissions
from storetree.permissions import Actor, Decision
from storetree.security import get_password_hash, verify_password

logger = logging.getLogger(__name__)


def _enforce(actor: Actor, decision: Decision, action: str, target) -> None:
    if not decision:
        logger.warning(
            "Denied %s on %s for user %s (%s): %s",
            action, target, actor.user_id, actor.role.value, decision.reason,
        )
    decision.enforce()


def _listing_scope(db: Session, node_id: int, include_descendants: bool) -> List[int]:
    if include_descendants:
        return list(ancestry.self_and_descendant_ids(db, node_id))
    return [node_id]


def _coerce_role(value) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise InvalidArgument("Role must be manager or employee")


# --- 1. NODOS ---

def list_accessible_nodes(db: Session, actor: Actor) -> List[Node]:
    """El nodo casa del actor y todo su subarbol."""
    return node_store.get_nodes(db, ancestry.self_and_descendant_ids(db, actor.home_node_id))


def get_node(db: Session, actor: Actor, node_id: int) -> Node:
    node = node_store.get_node(db, node_id)
    _enforce(actor, permissions.can_view_node(actor, node.position), "view node", node_id)
    return node


def list_descendants(db: Session, actor: Actor, node_id: int) -> List[Node]:
    get_node(db, actor, node_id)
    return ancestry.descendants(db, node_id)


def list_children(db: Session, actor: Actor, node_id: int) -> List[Node]:
    get_node(db, actor, node_id)
    return node_store.get_children(db, node_id)


def create_node(db: Session, actor: Actor, name: str, node_type, parent_id: Optional[int] = None) -> Node:
    # 1. Rol (antes de mirar el padre)
    _enforce(actor, permissions.require_capability(actor, "manage_nodes"), "create node", parent_id)

    # 2. Existencia del padre (404) y luego alcance (403)
    parent_position = None
    if parent_id is not None:
        parent_position = node_store.get_node(db, parent_id).position
    _enforce(actor, permissions.can_create_node(actor, parent_position), "create node", parent_id)

    node = node_store.create_node(db, name, node_type, parent_id)
    logger.info("User %s created node %s (%s) under %s", actor.user_id, node.id, node.name, parent_id)
    return node


def update_node(db: Session, actor: Actor, node_id: int, name: Optional[str] = None, node_type=None) -> Node:
    _enforce(actor, permissions.require_capability(actor, "manage_nodes"), "update node", node_id)
    node = node_store.get_node(db, node_id)
    _enforce(actor, permissions.can_update_node(actor, node.position), "update node", node_id)

    node = node_store.update_node_fields(db, node_id, name=name, node_type=node_type)
    logger.info("User %s updated node %s", actor.user_id, node_id)
    return node


def delete_node(db: Session, actor: Actor, node_id: int) -> None:
    _enforce(actor, permissions.require_capability(actor, "manage_nodes"), "delete node", node_id)
    node = node_store.get_node(db, node_id)
    _enforce(actor, permissions.can_delete_node(actor, node.position), "delete node", node_id)

    node_store.delete_node(db, node_id)
    logger.info("User %s deleted node %s", actor.user_id, node_id)


# --- 2. LISTADOS DE USUARIOS POR NODO ---

def list_employees(db: Session, actor: Actor, node_id: int, include_descendants: bool = False) -> List[User]:
    get_node(db, actor, node_id)
    scope = _listing_scope(db, node_id, include_descendants)
    return user_store.list_users(db, scope, role=Role.EMPLOYEE)


def list_managers(db: Session, actor: Actor, node_id: int, include_descendants: bool = False) -> List[User]:
    node = node_store.get_node(db, node_id)
    _enforce(actor, permissions.can_list_managers(actor, node.position), "list managers", node_id)
    scope = _listing_scope(db, node_id, include_descendants)
    return user_store.list_users(db, scope, role=Role.MANAGER)


def list_users(
    db: Session,
    actor: Actor,
    node_id: int,
    include_descendants: bool = False,
    role=None,
) -> List[User]:
    """
    El filtro de rol solo es efectivo para managers; el de un empleado se
    ignora sin validarlo.
    """
    get_node(db, actor, node_id)
    scope = _listing_scope(db, node_id, include_descendants)
    effective_role = permissions.visible_role_filter(actor, role)
    if effective_role is not None:
        effective_role = _coerce_role(effective_role)
    return user_store.list_users(db, scope, role=effective_role)


# --- 3. USUARIOS ---

def create_user(
    db: Session,
    actor: Actor,
    node_id: int,
    *,
    name: str,
    last_name: str,
    username: str,
    password: str,
    role=None,
) -> User:
    _enforce(actor, permissions.require_capability(actor, "manage_users"), "create user", node_id)
    node = node_store.get_node(db, node_id)
    _enforce(actor, permissions.can_create_user(actor, node.position), "create user", node_id)

    username = (username or "").strip()
    if not (name and last_name and username and password):
        raise InvalidArgument("Name, lastName, username, and password are required")

    user = user_store.create_user(
        db,
        name=name,
        last_name=last_name,
        username=username,
        password_hash=get_password_hash(password),
        role=_coerce_role(role) if role is not None else Role.EMPLOYEE,
        node_id=node_id,
    )
    logger.info("User %s created user %s (%s) at node %s", actor.user_id, user.id, user.username, node_id)
    return user


def get_user(db: Session, actor: Actor, user_id: int) -> User:
    user = user_store.get_user(db, user_id)
    decision = permissions.can_view_user(actor, user.role, user.node.position)
    _enforce(actor, decision, "view user", user_id)
    return user


def _get_managed_user(db: Session, actor: Actor, user_id: int, action: str) -> User:
    # Rol primero (403), luego existencia (404) y alcance (403)
    _enforce(actor, permissions.require_capability(actor, "manage_users"), action, user_id)
    return user_store.get_user(db, user_id)


def update_user(
    db: Session,
    actor: Actor,
    user_id: int,
    *,
    name: Optional[str] = None,
    last_name: Optional[str] = None,
    username: Optional[str] = None,
    role=None,
    node_id: Optional[int] = None,
) -> User:
    user = _get_managed_user(db, actor, user_id, "update user")
    _enforce(actor, permissions.can_manage_user(actor, user.node.position), "update user", user_id)

    # 1. Mover: solo se revisa el destino, no el nodo actual
    move_to = None
    if node_id is not None and node_id != user.node_id:
        destination = db.query(Node).filter(Node.id == node_id).first()
        if not destination:
            raise NotFound("Target node not found")
        _enforce(actor, permissions.can_move_user(actor, destination.position), "move user", user_id)
        move_to = destination.id

    # 2. Unicidad y enums antes de tocar el registro
    if username:
        username = username.strip()
        if user_store.username_taken(db, username, exclude_id=user.id):
            raise Conflict("Username already exists")
    new_role = _coerce_role(role) if role else None

    # 3. Aplicar cambios
    if move_to is not None:
        user.node_id = move_to
    if name:
        user.name = name
    if last_name:
        user.last_name = last_name
    if username:
        user.username = username
    if new_role is not None:
        user.role = new_role

    user = user_store.save_user(db, user)
    logger.info("User %s updated user %s", actor.user_id, user_id)
    return user


def delete_user(db: Session, actor: Actor, user_id: int) -> None:
    user = _get_managed_user(db, actor, user_id, "delete user")
    decision = permissions.can_delete_user(actor, user.id, user.node.position)
    _enforce(actor, decision, "delete user", user_id)

    user_store.delete_user(db, user)
    logger.info("User %s deleted user %s", actor.user_id, user_id)


# --- 4. CREDENCIALES ---

def register_user(
    db: Session,
    *,
    name: str,
    last_name: str,
    username: str,
    password: str,
    node_id: int,
    role=None,
) -> User:
    """Registro publico: valida unicidad y luego que exista el nodo."""
    username = (username or "").strip()
    if not (name and last_name and username and password and node_id):
        raise InvalidArgument("All fields are required")
    if user_store.username_taken(db, username):
        raise Conflict("Username already exists")
    node_store.get_node(db, node_id)

    user = user_store.create_user(
        db,
        name=name,
        last_name=last_name,
        username=username,
        password_hash=get_password_hash(password),
        role=_coerce_role(role) if role is not None else Role.EMPLOYEE,
        node_id=node_id,
    )
    logger.info("Registered user %s (%s) at node %s", user.id, user.username, node_id)
    return user


def authenticate(db: Session, username: str, password: str) -> User:
    user = user_store.get_user_by_username(db, username)
    if not user or not verify_password(password, user.password_hash):
        raise Unauthenticated("Invalid credentials")
    return user
