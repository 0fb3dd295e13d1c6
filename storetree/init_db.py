"""
Crea las tablas y siembra la jerarquia de demostracion.

Los nodos se crean a traves del almacen (``crud.nodes.create_node``), asi la
ruta de ancestros siempre la calcula el propio almacen.

    python -m storetree.init_db
"""
import logging

from sqlalchemy.orm import Session

from storetree.config import configure_logging
from storetree.crud import nodes as node_store, users as user_store
from storetree.database import SessionLocal, engine, Base
from storetree.models import Node, NodeType, Role, User
from storetree.security import get_password_hash

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = "password123"

# (nombre, tipo, padre)
NODES = [
    ("Srbija", NodeType.OFFICE, None),
    ("Vojvodina", NodeType.OFFICE, "Srbija"),
    ("Grad Beograd", NodeType.OFFICE, "Srbija"),
    ("Severnobacki okrug", NodeType.OFFICE, "Vojvodina"),
    ("Juznobacki okrug", NodeType.OFFICE, "Vojvodina"),
    ("Novi Beograd", NodeType.OFFICE, "Grad Beograd"),
    ("Vracar", NodeType.OFFICE, "Grad Beograd"),
    ("Subotica", NodeType.OFFICE, "Severnobacki okrug"),
    ("Novi Sad", NodeType.OFFICE, "Juznobacki okrug"),
    ("Bezanija", NodeType.OFFICE, "Novi Beograd"),
    ("Neimar", NodeType.OFFICE, "Vracar"),
    ("Crveni krst", NodeType.OFFICE, "Vracar"),
    ("Detelinara", NodeType.OFFICE, "Novi Sad"),
    ("Liman", NodeType.OFFICE, "Novi Sad"),
    ("Radnja 1", NodeType.STORE, "Subotica"),
    ("Radnja 2", NodeType.STORE, "Detelinara"),
    ("Radnja 3", NodeType.STORE, "Detelinara"),
    ("Radnja 4", NodeType.STORE, "Liman"),
    ("Radnja 5", NodeType.STORE, "Liman"),
    ("Radnja 6", NodeType.STORE, "Bezanija"),
    ("Radnja 7", NodeType.STORE, "Neimar"),
    ("Radnja 8", NodeType.STORE, "Crveni krst"),
    ("Radnja 9", NodeType.STORE, "Crveni krst"),
]

# (nombre, apellido, username, rol, nodo)
USERS = [
    ("Petar", "Petrovic", "petar_ceo", Role.MANAGER, "Srbija"),
    ("Ana", "Anic", "ana_vojvodina", Role.MANAGER, "Vojvodina"),
    ("Marko", "Markovic", "marko_beograd", Role.MANAGER, "Grad Beograd"),
    ("Jovan", "Jovanovic", "jovan_novibeograd", Role.MANAGER, "Novi Beograd"),
    ("Milica", "Milic", "milica_vracar", Role.MANAGER, "Vracar"),
    ("Stefan", "Stefanovic", "stefan_subotica", Role.MANAGER, "Subotica"),
    ("Nikola", "Nikolic", "nikola_novisad", Role.MANAGER, "Novi Sad"),
    ("Ivana", "Ivic", "ivana_radnja1", Role.MANAGER, "Radnja 1"),
    ("Dragan", "Dragic", "dragan_radnja6", Role.MANAGER, "Radnja 6"),
    ("Jelena", "Jelic", "jelena_emp_srbija", Role.EMPLOYEE, "Srbija"),
    ("Milan", "Milanovic", "milan_emp_vojvodina", Role.EMPLOYEE, "Vojvodina"),
    ("Sanja", "Sanjic", "sanja_emp_novibeograd", Role.EMPLOYEE, "Novi Beograd"),
    ("Dejan", "Dejic", "dejan_emp_bezanija", Role.EMPLOYEE, "Bezanija"),
    ("Tamara", "Tamaric", "tamara_emp_radnja1", Role.EMPLOYEE, "Radnja 1"),
    ("Igor", "Igoric", "igor_emp_radnja6", Role.EMPLOYEE, "Radnja 6"),
    ("Vesna", "Vesic", "vesna_emp_radnja7", Role.EMPLOYEE, "Radnja 7"),
    ("Bojan", "Bojic", "bojan_emp_radnja3", Role.EMPLOYEE, "Radnja 3"),
]


def seed(db: Session, password: str = DEFAULT_PASSWORD) -> dict:
    """Siembra nodos y usuarios si la base esta vacia. Devuelve {nombre: Node}."""
    if db.query(Node.id).first() is not None:
        logger.info("Database already has nodes, skipping seed")
        return {node.name: node for node in db.query(Node).all()}

    # 1. Nodos (los padres siempre aparecen antes que sus hijos en NODES)
    created = {}
    for name, node_type, parent_name in NODES:
        parent_id = created[parent_name].id if parent_name else None
        created[name] = node_store.create_node(db, name, node_type, parent_id)
    logger.info("Created %d nodes", len(created))

    # 2. Usuarios: un solo hash para todos
    password_hash = get_password_hash(password)
    for name, last_name, username, role, node_name in USERS:
        user_store.create_user(
            db,
            name=name,
            last_name=last_name,
            username=username,
            password_hash=password_hash,
            role=role,
            node_id=created[node_name].id,
        )
    logger.info("Created %d users", db.query(User).count())

    return created


def init_db():
    configure_logging()
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed(db)
        logger.info("Seed completed. Manager (top level): petar_ceo / %s", DEFAULT_PASSWORD)
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
