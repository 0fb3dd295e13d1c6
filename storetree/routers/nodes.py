from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storetree import directory
from storetree.database import get_db
from storetree.permissions import Actor
from storetree.schemas.nodes import (
    ChildrenResponse, DescendantsResponse, MessageResponse, NodeCreate,
    NodeListResponse, NodeMessageResponse, NodeResponse, NodeUpdate,
)
from storetree.security import get_current_actor

router = APIRouter()


# --- 1. NODOS ACCESIBLES (propio + descendientes) ---
@router.get("", response_model=NodeListResponse)
def read_nodes(db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    nodes = directory.list_accessible_nodes(db, actor)
    return {"nodes": nodes, "count": len(nodes)}


# --- 2. CREAR (solo managers) ---
@router.post("", response_model=NodeMessageResponse, status_code=status.HTTP_201_CREATED)
def create_node(
    node_in: NodeCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor)
):
    node = directory.create_node(db, actor, node_in.name, node_in.type, node_in.parent_id)
    return {"message": "Node created successfully", "node": node}


# --- 3. DETALLE (con ruta de ancestros) ---
@router.get("/{node_id}", response_model=NodeResponse)
def read_node(node_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return {"node": directory.get_node(db, actor, node_id)}


@router.get("/{node_id}/descendants", response_model=DescendantsResponse)
def read_descendants(node_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    descendants = directory.list_descendants(db, actor, node_id)
    return {"descendants": descendants, "count": len(descendants)}


@router.get("/{node_id}/children", response_model=ChildrenResponse)
def read_children(node_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    children = directory.list_children(db, actor, node_id)
    return {"children": children, "count": len(children)}


# --- 4. ACTUALIZAR (solo name/type) ---
@router.put("/{node_id}", response_model=NodeMessageResponse)
def update_node(
    node_id: int,
    node_in: NodeUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor)
):
    node = directory.update_node(db, actor, node_id, name=node_in.name, node_type=node_in.type)
    return {"message": "Node updated successfully", "node": node}


# --- 5. ELIMINAR (sin cascada) ---
@router.delete("/{node_id}", response_model=MessageResponse)
def delete_node(node_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    directory.delete_node(db, actor, node_id)
    return {"message": "Node deleted successfully"}
