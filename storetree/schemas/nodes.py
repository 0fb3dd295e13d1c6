from datetime import datetime
from typing import List, Optional

from pydantic import Field

from storetree.models import NodeType
from storetree.schemas.base import CamelModel


class NodeRef(CamelModel):
    """Datos del padre/ancestro desnormalizados para mostrar."""
    id: int
    name: str
    type: NodeType


class NodeBase(CamelModel):
    name: str = Field(..., min_length=1)
    type: NodeType


class NodeCreate(NodeBase):
    parent_id: Optional[int] = None


class NodeUpdate(CamelModel):
    name: Optional[str] = None
    type: Optional[NodeType] = None


class NodeRead(NodeBase):
    id: int
    parent_id: Optional[int] = None
    # Siempre ids, raiz primero
    ancestor_ids: List[int] = Field(default_factory=list, serialization_alias="ancestors")
    parent: Optional[NodeRef] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class NodeDetail(NodeRead):
    ancestor_nodes: List[NodeRef] = Field(default_factory=list)


# --- Respuestas ---

class NodeResponse(CamelModel):
    node: NodeDetail


class NodeMessageResponse(CamelModel):
    message: str
    node: NodeRead


class NodeListResponse(CamelModel):
    nodes: List[NodeRead]
    count: int


class DescendantsResponse(CamelModel):
    descendants: List[NodeRead]
    count: int


class ChildrenResponse(CamelModel):
    children: List[NodeRead]
    count: int


class MessageResponse(CamelModel):
    message: str
