"""
Consultas de solo lectura sobre la ruta materializada.

Todo se resuelve con la tabla ``node_ancestors``; nunca se recorre
``parent_id`` nodo por nodo.
"""
from typing import Iterator, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from storetree.models import Node, NodeAncestor, NodePosition


def is_self_or_descendant(candidate: NodePosition, ancestor_id: int) -> bool:
    """True si ``candidate`` es ``ancestor_id`` o esta dentro de su subarbol."""
    return candidate.id == ancestor_id or ancestor_id in candidate.ancestors


def descendant_ids(db: Session, node_id: int) -> Iterator[int]:
    """Ids de todos los descendientes (no solo hijos). Sin orden garantizado."""
    result = db.execute(
        select(NodeAncestor.node_id).where(NodeAncestor.ancestor_id == node_id)
    )
    for (descendant_id,) in result:
        yield descendant_id


def self_and_descendant_ids(db: Session, node_id: int) -> Iterator[int]:
    yield node_id
    yield from descendant_ids(db, node_id)


def descendants(db: Session, node_id: int) -> List[Node]:
    return (
        db.query(Node)
        .join(NodeAncestor, NodeAncestor.node_id == Node.id)
        .filter(NodeAncestor.ancestor_id == node_id)
        .order_by(Node.id)
        .all()
    )
