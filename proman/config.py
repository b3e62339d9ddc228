"""
Configuración centralizada de proman
"""
import logging
import os
import sys
from pathlib import Path
from dotenv import load_dotenv, find_dotenv


def _user_config_dir() -> Path:
    """Directorio de configuración por usuario según la plataforma"""
    if sys.platform == "win32":
        return Path(os.getenv("APPDATA", str(Path.home() / "AppData" / "Roaming")))
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    return Path(os.getenv("XDG_CONFIG_HOME") or (Path.home() / ".config"))


class Config:
    """Configuración centralizada del sistema"""

    ENV_FILE = find_dotenv(usecwd=True)

    # Variables de entorno desde el .env más cercano al directorio de trabajo
    load_dotenv(ENV_FILE)

    CONFIG_DIR = Path(os.getenv("PROMAN_CONFIG_DIR")) if os.getenv("PROMAN_CONFIG_DIR") else (_user_config_dir() / "proman")
    CONFIG_FILE = CONFIG_DIR / "config.json"
    LOG_DIR = Path(os.getenv("PROMAN_LOG_DIR")) if os.getenv("PROMAN_LOG_DIR") else (CONFIG_DIR / "logs")

    # Los backups se escriben en el directorio actual salvo que se indique otro
    BACKUP_DIR = Path(os.getenv("PROMAN_BACKUP_DIR", "."))

    PAGER = os.getenv("PAGER") or "less"

    LOG_LEVEL = getattr(logging, os.getenv("PROMAN_LOG_LEVEL", "INFO").upper(), logging.INFO)
    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    CONSOLE_FORMAT = '%(message)s'

    TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

    # Roles internos de la plataforma que nunca se respaldan
    EXCLUDED_ROLES = [
        "postgres",
        "anon",
        "authenticated",
        "authenticator",
        "service_role",
        "supabase_admin",
        "supabase_auth_admin",
        "supabase_functions_admin",
        "supabase_read_only_user",
        "supabase_realtime_admin",
        "supabase_replication_admin",
        "supabase_storage_admin",
        "dashboard_user",
        "pgbouncer",
        "pgsodium_keyholder",
        "pgsodium_keyiduser",
        "pgsodium_keymaker",
    ]

    # Esquemas gestionados por la plataforma
    EXCLUDED_SCHEMAS = [
        "auth",
        "cron",
        "extensions",
        "graphql",
        "graphql_public",
        "net",
        "pgbouncer",
        "pgsodium",
        "pgsodium_masks",
        "realtime",
        "storage",
        "supabase_functions",
        "supabase_migrations",
        "vault",
        "_realtime",
    ]

    DEFAULT_CONFIG = {
        "connections": {},
        "binaries": {
            "psql": "",
            "pg_dumpall": "",
            "pg_dump": "",
            "supabase": "",
            "results": ""
        },
        "editor": {
            "default": ""
        }
    }

    @classmethod
    def ensure_directories(cls):
        """Crea los directorios necesarios si no existen"""
        cls.CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)
