"""
Modelos de datos del sistema
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import quote

from .exceptions import ConfigurationIncompleteError


@dataclass
class ConnectionProfile:
    """Parámetros de conexión de un proyecto registrado"""
    host: str
    port: str
    user: str
    password: str
    db_name: str = "postgres"
    supabase_project_id: str = ""

    def __post_init__(self):
        """Normaliza el puerto: el archivo lo guarda como texto"""
        self.port = str(self.port) if self.port not in (None, "") else "5432"

    @classmethod
    def from_dict(cls, data: Dict) -> "ConnectionProfile":
        # Un null en el archivo equivale a campo vacío
        return cls(
            host=str(data.get('host') or ''),
            port=data.get('port') or '5432',
            user=str(data.get('user') or ''),
            password=str(data.get('password') or ''),
            db_name=str(data.get('db_name') or 'postgres'),
            supabase_project_id=str(data.get('supabase_project_id') or '')
        )

    def to_dict(self) -> Dict:
        # Orden de claves del archivo de configuración
        return {
            "password": self.password,
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "db_name": self.db_name,
            "supabase_project_id": self.supabase_project_id,
        }

    def connection_args(self) -> List[str]:
        """Argumentos -h/-p/-U/-d para psql y pg_dump"""
        return ["-h", self.host, "-p", self.port, "-U", self.user, "-d", self.db_name]

    def connection_url(self) -> str:
        """
        URL de conexión sin contraseña

        La contraseña viaja siempre en PGPASSWORD, nunca en la línea de comandos.
        """
        # IPv6 literal entre corchetes
        host = f"[{self.host}]" if ":" in self.host and not self.host.startswith("[") else self.host
        return (
            f"postgresql://{quote(self.user, safe='')}@{host}:{self.port}"
            f"/{quote(self.db_name, safe='')}"
        )


@dataclass
class ToolPaths:
    """Rutas a los binarios externos; cadena vacía significa sin configurar"""
    psql: str = ""
    pg_dumpall: str = ""
    pg_dump: str = ""
    supabase: str = ""
    results: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "ToolPaths":
        return cls(**{name: str(data.get(name) or "") for name in cls.names()})

    @classmethod
    def names(cls) -> List[str]:
        return ["psql", "pg_dumpall", "pg_dump", "supabase", "results"]

    def to_dict(self) -> Dict:
        return {name: getattr(self, name) for name in self.names()}

    def require(self, *names: str):
        """
        Verifica que las herramientas indicadas estén configuradas

        Args:
            names: Nombres de herramienta (psql, pg_dump...)

        Raises:
            ConfigurationIncompleteError: Si alguna ruta está vacía
        """
        missing = [name for name in names if not getattr(self, name)]
        if missing:
            raise ConfigurationIncompleteError(missing)


@dataclass
class EditorSettings:
    """Visor de diferencias preferido"""
    default: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "EditorSettings":
        return cls(default=str(data.get('default') or ""))

    def to_dict(self) -> Dict:
        return {"default": self.default}


class BackupKind(Enum):
    """Tipos de volcado; el orden de declaración es el orden de ejecución"""
    ROLES = "roles"
    SCHEMA = "schema"
    DATA = "data"


@dataclass
class BackupOptions:
    """Opciones de un backup"""
    kinds: List[BackupKind] = field(default_factory=list)
    prefix: Optional[str] = None
    official: bool = False
    output_dir: Optional[Path] = None

    def selected_kinds(self) -> List[BackupKind]:
        """Tipos a respaldar en orden; sin selección se respaldan los tres"""
        if not self.kinds:
            return list(BackupKind)
        return [kind for kind in BackupKind if kind in self.kinds]


@dataclass
class BackupResult:
    """Resultado de un volcado individual"""
    project_id: str
    kind: BackupKind
    output_file: str
    duration_seconds: float = 0.0

    def __str__(self):
        return f"✓ {self.project_id} [{self.kind.value}]: {self.output_file} ({self.duration_seconds:.2f}s)"


class CloneState(Enum):
    """Estados del flujo de clonado"""
    INIT = "init"
    BACKUPS_DONE = "backups_done"
    DIFF_GENERATED = "diff_generated"
    NO_CHANGES = "no_changes"
    CANCELLED = "cancelled"
    APPLYING = "applying"
    APPLIED = "applied"
    APPLY_FAILED = "apply_failed"
