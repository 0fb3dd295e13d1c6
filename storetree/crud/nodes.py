"""
Almacen de la jerarquia.

Unico lugar que escribe la ruta de ancestros de un nodo: se calcula una sola
vez al crearlo (ancestros del padre + el padre) y no existe operacion que la
modifique despues.
"""
import logging
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storetree.exceptions import InvalidArgument, NotFound, PreconditionFailed
from storetree.models import Node, NodeAncestor, NodeType, User

logger = logging.getLogger(__name__)


def coerce_node_type(value) -> NodeType:
    try:
        return NodeType(value)
    except ValueError:
        raise InvalidArgument("Type must be office or store")


def get_node(db: Session, node_id: int) -> Node:
    node = db.query(Node).filter(Node.id == node_id).first()
    if not node:
        raise NotFound("Node not found")
    return node


def get_nodes(db: Session, node_ids: Iterable[int]) -> List[Node]:
    ids = list(node_ids)
    if not ids:
        return []
    return db.query(Node).filter(Node.id.in_(ids)).order_by(Node.id).all()


def get_children(db: Session, node_id: int) -> List[Node]:
    """Hijos directos (no todos los descendientes)."""
    return db.query(Node).filter(Node.parent_id == node_id).order_by(Node.id).all()


def has_children(db: Session, node_id: int) -> bool:
    return db.query(Node.id).filter(Node.parent_id == node_id).first() is not None


def has_users(db: Session, node_id: int) -> bool:
    return db.query(User.id).filter(User.node_id == node_id).first() is not None


def create_node(db: Session, name: str, node_type, parent_id: Optional[int] = None) -> Node:
    """
    Crea un nodo. Sin ``parent_id`` queda como raiz (sin ancestros); con padre,
    su ruta es la del padre seguida del id del padre.
    """
    if not name:
        raise InvalidArgument("Name and type are required")
    node_type = coerce_node_type(node_type)

    path = []
    if parent_id is not None:
        parent = db.query(Node).filter(Node.id == parent_id).first()
        if not parent:
            raise NotFound("Parent node not found")
        path = parent.ancestor_ids + [parent.id]

    node = Node(name=name, type=node_type, parent_id=parent_id)
    node.ancestor_links = [
        NodeAncestor(ancestor_id=ancestor_id, depth=depth)
        for depth, ancestor_id in enumerate(path)
    ]
    db.add(node)
    try:
        db.commit()
    except IntegrityError:
        # El padre desaparecio entre la lectura y la escritura
        db.rollback()
        raise NotFound("Parent node not found")
    db.refresh(node)

    logger.debug("Node %s (%s) created under %s, path=%s", node.id, node.name, parent_id, path)
    return node


def update_node_fields(db: Session, node_id: int, name: Optional[str] = None, node_type=None) -> Node:
    """Solo ``name`` y ``type`` son mutables."""
    node = get_node(db, node_id)

    if name:
        node.name = name
    if node_type is not None:
        node.type = coerce_node_type(node_type)

    db.commit()
    db.refresh(node)
    return node


def delete_node(db: Session, node_id: int) -> None:
    """Borra un nodo sin hijos ni usuarios asignados. No hay cascada."""
    node = get_node(db, node_id)

    if has_children(db, node_id):
        raise PreconditionFailed("Cannot delete node with children. Delete children first.")
    if has_users(db, node_id):
        raise PreconditionFailed("Cannot delete node with assigned users. Reassign users first.")

    db.delete(node)
    try:
        db.commit()
    except IntegrityError:
        # Un hijo o usuario se asigno despues de la verificacion; las FK lo impiden
        db.rollback()
        raise PreconditionFailed("Node gained children or users while being deleted")

    logger.debug("Node %s deleted", node_id)
