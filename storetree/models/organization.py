# storetree/models/organization.py
import enum
from dataclasses import dataclass
from typing import Tuple

from sqlalchemy import Column, Integer, String, ForeignKey, Enum, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from storetree.database import Base


class NodeType(str, enum.Enum):
    OFFICE = "office"
    STORE = "store"


@dataclass(frozen=True)
class NodePosition:
    """Posicion de un nodo en el arbol: su id y la ruta raiz -> padre."""

    id: int
    ancestors: Tuple[int, ...] = ()


class Node(Base):
    """
    Oficina o tienda dentro del arbol organizacional.

    La ruta de ancestros se materializa en ``node_ancestors`` al crear el nodo
    (ver ``storetree.crud.nodes.create_node``) y no se vuelve a tocar.
    """
    __tablename__ = "nodes"
    __table_args__ = {'extend_existing': True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    type = Column(Enum(NodeType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    parent_id = Column(Integer, ForeignKey("nodes.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    parent = relationship("Node", remote_side=[id], back_populates="children")
    # passive_deletes="all": la BD rechaza el borrado en vez de anular parent_id
    children = relationship("Node", back_populates="parent", passive_deletes="all")

    # Ordenados raiz primero
    ancestor_links = relationship(
        "NodeAncestor",
        foreign_keys="NodeAncestor.node_id",
        order_by="NodeAncestor.depth",
        cascade="all, delete-orphan",
        back_populates="node",
    )

    users = relationship("User", back_populates="node", passive_deletes="all")

    @property
    def ancestor_ids(self):
        return [link.ancestor_id for link in self.ancestor_links]

    @property
    def ancestor_nodes(self):
        return [link.ancestor for link in self.ancestor_links]

    @property
    def position(self) -> NodePosition:
        return NodePosition(id=self.id, ancestors=tuple(self.ancestor_ids))


class NodeAncestor(Base):
    """Una fila por cada (nodo, ancestro); depth 0 es la raiz."""
    __tablename__ = "node_ancestors"
    __table_args__ = {'extend_existing': True}

    node_id = Column(Integer, ForeignKey("nodes.id"), primary_key=True)
    ancestor_id = Column(Integer, ForeignKey("nodes.id"), primary_key=True, index=True)
    depth = Column(Integer, nullable=False)

    node = relationship("Node", foreign_keys=[node_id], back_populates="ancestor_links")
    ancestor = relationship("Node", foreign_keys=[ancestor_id])
