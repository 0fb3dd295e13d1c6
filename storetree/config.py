import logging
import os

from dotenv import load_dotenv

# Variables ya definidas en el entorno tienen prioridad sobre el .env
load_dotenv()


class Settings:
    DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./storetree.db")

    # JWT
    SECRET_KEY = os.environ.get("SECRET_KEY") or "storetree_secret_key_change_me_in_prod"
    ALGORITHM = os.environ.get("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    CORS_ORIGINS = [o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()]


settings = Settings()


def configure_logging(level=None):
    """Configura el logger raiz una sola vez; llamadas repetidas no duplican handlers."""
    logging.basicConfig(
        level=level or settings.LOG_LEVEL,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
