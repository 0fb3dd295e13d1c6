"""Reglas de acceso por posicion en el arbol.

Todas las funciones son puras: reciben el actor y posiciones de nodos ya
cargadas (``NodePosition``) y devuelven una ``Decision``. No leen ni escriben
en la base de datos; el directorio las consulta antes de cualquier mutacion.

Cada regla se construye sobre un unico predicado, ``is_self_or_descendant``:
el objetivo debe ser el nodo casa del actor o estar dentro de su subarbol.
"""
from dataclasses import dataclass
from typing import Dict, Optional, Type

from storetree.crud.ancestry import is_self_or_descendant
from storetree.exceptions import DomainError, Forbidden, PreconditionFailed
from storetree.models import NodePosition, Role

# Capacidades por rol. Cada miembro de Role debe tener entrada; un rol nuevo
# sin capacidades declaradas produce KeyError en lugar de un permiso silencioso.
_ROLE_CAPABILITIES: Dict[Role, frozenset] = {
    Role.MANAGER: frozenset({"manage_nodes", "manage_users", "view_managers"}),
    Role.EMPLOYEE: frozenset(),
}


def role_can(role: Role, capability: str) -> bool:
    return capability in _ROLE_CAPABILITIES[Role(role)]


@dataclass(frozen=True)
class Actor:
    """Identidad autenticada: (usuario, rol, nodo casa)."""

    user_id: int
    role: Role
    home_node_id: int

    @classmethod
    def from_user(cls, user) -> "Actor":
        return cls(user_id=user.id, role=Role(user.role), home_node_id=user.node_id)


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""
    error: Type[DomainError] = Forbidden

    def __bool__(self):
        return self.allowed

    def enforce(self) -> None:
        if not self.allowed:
            raise self.error(self.reason)


ALLOW = Decision(True)


def deny(reason: str, error: Type[DomainError] = Forbidden) -> Decision:
    return Decision(False, reason, error)


def _in_scope(actor: Actor, target: NodePosition) -> bool:
    return is_self_or_descendant(target, actor.home_node_id)


# --- NODOS ---

def can_view_node(actor: Actor, target: NodePosition) -> Decision:
    """Ver un nodo, sus hijos/descendientes o listar sus usuarios."""
    if not _in_scope(actor, target):
        return deny("Access denied to this node")
    return ALLOW


def can_create_node(actor: Actor, parent: Optional[NodePosition]) -> Decision:
    """Sin padre se crea una raiz: basta con ser manager."""
    if not role_can(actor.role, "manage_nodes"):
        return deny("Insufficient permissions")
    if parent is not None and not _in_scope(actor, parent):
        return deny("Cannot create node under inaccessible parent")
    return ALLOW


def can_update_node(actor: Actor, target: NodePosition) -> Decision:
    if not role_can(actor.role, "manage_nodes"):
        return deny("Insufficient permissions")
    if not _in_scope(actor, target):
        return deny("Access denied to this node")
    return ALLOW


def can_delete_node(actor: Actor, target: NodePosition) -> Decision:
    """
    Ademas del alcance, un manager nunca puede borrar su propio nodo casa.
    Las precondiciones de hijos/usuarios las verifica el almacen.
    """
    decision = can_update_node(actor, target)
    if not decision:
        return decision
    if target.id == actor.home_node_id:
        return deny("Cannot delete your own node", PreconditionFailed)
    return ALLOW


# --- USUARIOS ---

def can_view_user(actor: Actor, target_role: Role, target_home: NodePosition) -> Decision:
    """
    Un manager ve cualquier usuario de su subarbol. Un empleado solo ve
    empleados de su subarbol; los registros de managers le son opacos.
    """
    if not _in_scope(actor, target_home):
        return deny("Access denied to this user")
    if not role_can(actor.role, "view_managers") and Role(target_role) != Role.EMPLOYEE:
        return deny("Employees cannot view manager details")
    return ALLOW


def can_manage_user(actor: Actor, target_home: NodePosition) -> Decision:
    if not role_can(actor.role, "manage_users"):
        return deny("Only managers can manage users")
    if not _in_scope(actor, target_home):
        return deny("Access denied to manage this user")
    return ALLOW


def can_move_user(actor: Actor, destination: NodePosition) -> Decision:
    """Solo se valida el destino; el nodo actual del usuario no se revisa."""
    if not _in_scope(actor, destination):
        return deny("Cannot move user to inaccessible node")
    return ALLOW


def can_delete_user(actor: Actor, target_user_id: int, target_home: NodePosition) -> Decision:
    decision = can_manage_user(actor, target_home)
    if not decision:
        return decision
    if target_user_id == actor.user_id:
        return deny("Cannot delete yourself", PreconditionFailed)
    return ALLOW


def can_create_user(actor: Actor, node: NodePosition) -> Decision:
    if not role_can(actor.role, "manage_users"):
        return deny("Insufficient permissions")
    return can_view_node(actor, node)


def can_list_managers(actor: Actor, node: NodePosition) -> Decision:
    decision = can_view_node(actor, node)
    if not decision:
        return decision
    if not role_can(actor.role, "view_managers"):
        return deny("Only managers can view other managers")
    return ALLOW


def visible_role_filter(actor: Actor, requested: Optional[Role]) -> Optional[Role]:
    """
    Filtro de rol efectivo para el listado general de usuarios: los empleados
    siempre quedan restringidos a empleados; para managers el filtro pedido
    se respeta tal cual.
    """
    if not role_can(actor.role, "view_managers"):
        return Role.EMPLOYEE
    return requested


def require_capability(actor: Actor, capability: str) -> Decision:
    """Chequeo solo de rol, previo a cargar el objetivo."""
    if not role_can(actor.role, capability):
        return deny("Insufficient permissions")
    return ALLOW
