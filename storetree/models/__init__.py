# storetree/models/__init__.py

# 1. Base de datos (Origen de la clase declarativa)
from storetree.database import Base

# 2. Organizacion (Nodos y su ruta de ancestros)
from .organization import Node, NodeAncestor, NodePosition, NodeType

# 3. Usuarios y Roles
from .users import User, Role
