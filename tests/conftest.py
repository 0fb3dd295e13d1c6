from __future__ import annotations

import os

# Antes de importar storetree: hashes rapidos y ninguna BD en disco
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storetree.crud import nodes as node_store, users as user_store
from storetree.database import Base, enable_sqlite_foreign_keys, get_db
from storetree.main import app
from storetree.models import NodeType, Role
from storetree.permissions import Actor
from storetree.security import create_user_token, get_password_hash

PASSWORD = "password123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def tree(db) -> dict[str, int]:
    """
    Srbija
    ├── Vojvodina
    │   └── Subotica
    │       └── Radnja 1 (store)
    └── Grad Beograd
        └── Novi Beograd
            └── Bezanija
                └── Radnja 6 (store)
    """
    ids: dict[str, int] = {}

    def add(key, name, parent=None, node_type=NodeType.OFFICE):
        node = node_store.create_node(db, name, node_type, ids[parent] if parent else None)
        ids[key] = node.id

    add("srbija", "Srbija")
    add("vojvodina", "Vojvodina", "srbija")
    add("grad_beograd", "Grad Beograd", "srbija")
    add("novi_beograd", "Novi Beograd", "grad_beograd")
    add("bezanija", "Bezanija", "novi_beograd")
    add("radnja6", "Radnja 6", "bezanija", NodeType.STORE)
    add("subotica", "Subotica", "vojvodina")
    add("radnja1", "Radnja 1", "subotica", NodeType.STORE)
    return ids


@pytest.fixture
def people(db, tree) -> dict[str, int]:
    password_hash = get_password_hash(PASSWORD)
    roster = {
        "ceo": ("Petar", "Petrovic", "petar_ceo", Role.MANAGER, "srbija"),
        "nb_manager": ("Jovan", "Jovanovic", "jovan_novibeograd", Role.MANAGER, "novi_beograd"),
        "bez_employee": ("Dejan", "Dejic", "dejan_emp_bezanija", Role.EMPLOYEE, "bezanija"),
        "r6_employee": ("Igor", "Igoric", "igor_emp_radnja6", Role.EMPLOYEE, "radnja6"),
        "r6_manager": ("Dragan", "Dragic", "dragan_radnja6", Role.MANAGER, "radnja6"),
        "voj_manager": ("Ana", "Anic", "ana_vojvodina", Role.MANAGER, "vojvodina"),
    }
    ids = {}
    for key, (name, last_name, username, role, node_key) in roster.items():
        user = user_store.create_user(
            db,
            name=name,
            last_name=last_name,
            username=username,
            password_hash=password_hash,
            role=role,
            node_id=tree[node_key],
        )
        ids[key] = user.id
    return ids


@pytest.fixture
def actor(db, people):
    """actor("nb_manager") -> Actor del usuario sembrado."""

    def _actor(key: str) -> Actor:
        return Actor.from_user(user_store.get_user(db, people[key]))

    return _actor


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    api = TestClient(app)
    yield api
    app.dependency_overrides.clear()


@pytest.fixture
def auth(db, people):
    """auth("ceo") -> cabecera Authorization con un token valido."""

    def _headers(key: str) -> dict[str, str]:
        token = create_user_token(user_store.get_user(db, people[key]))
        return {"Authorization": f"Bearer {token}"}

    return _headers
