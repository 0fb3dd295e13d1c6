import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder

from storetree.config import settings, configure_logging
from storetree.database import engine
from storetree.exceptions import DomainError, Unauthenticated
from storetree.models import Base
from storetree.routers import auth, nodes, users

logger = logging.getLogger(__name__)

configure_logging()


# 1. CREACIÓN AUTOMÁTICA DE TABLAS
@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("Storetree API ready (database: %s)", engine.url.render_as_string(hide_password=True))
    yield


app = FastAPI(
    title="Storetree",
    description="Jerarquia de oficinas y tiendas con control de acceso por subarbol",
    version="1.0.0",
    lifespan=lifespan,
)

# 2. CONFIGURACIÓN DE CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 3. REGISTRO DE ROUTERS
# users va antes que nodes: comparten el prefijo /api/nodes
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(users.router, prefix="/api/nodes", tags=["Users"])
app.include_router(nodes.router, prefix="/api/nodes", tags=["Nodes"])


@app.get("/api/health")
def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


# --- 4. MANEJO DE ERRORES ---
@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    # Igual que los 401 de get_current_user
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Campos faltantes o enums invalidos son 400, no 422
    return JSONResponse(
        status_code=400,
        content={"detail": "Validation error", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(404)
async def not_found_exception_handler(request: Request, exc):
    detail = getattr(exc, "detail", None)
    if detail and detail != "Not Found":
        return JSONResponse(status_code=404, content={"detail": detail})
    return JSONResponse(status_code=404, content={"detail": "Route not found"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
