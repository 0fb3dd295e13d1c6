# storetree/routers/__init__.py

# Expone los modulos para que "from storetree.routers import nodes" funcione
from . import auth
from . import nodes
from . import users
