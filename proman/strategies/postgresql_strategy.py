"""
Estrategia de backup para PostgreSQL con pg_dumpall / pg_dump
"""
from pathlib import Path
from typing import IO, List, Optional, Sequence
from .base_strategy import BackupStrategy
from ..config import Config
from ..models import BackupKind, ConnectionProfile, ToolPaths


def filter_roles(dump_text: str, excluded_roles: Sequence[str] = tuple(Config.EXCLUDED_ROLES)) -> str:
    """
    Elimina las líneas CREATE ROLE de los roles internos de la plataforma

    Solo se descartan las líneas que coinciden exactamente con
    ``CREATE ROLE <nombre>;``; el resto se conserva tal cual.

    Args:
        dump_text: Salida de pg_dumpall --roles-only
        excluded_roles: Roles a descartar

    Returns:
        Texto filtrado
    """
    excluded = {f"CREATE ROLE {role};" for role in excluded_roles}
    return "".join(
        line for line in dump_text.splitlines(keepends=True)
        if line.strip() not in excluded
    )


class PostgreSQLBackupStrategy(BackupStrategy):
    """Estrategia de backup usando las herramientas de PostgreSQL"""

    SCHEMA_FLAGS = ['--schema-only', '--no-owner', '--no-privileges']
    DATA_FLAGS = ['--data-only', '--quote-all-identifiers']

    def required_tools(self, kinds: List[BackupKind]) -> List[str]:
        tools = []
        if BackupKind.ROLES in kinds:
            tools.append('pg_dumpall')
        if BackupKind.SCHEMA in kinds or BackupKind.DATA in kinds:
            tools.append('pg_dump')
        return tools

    def dump(self, profile: ConnectionProfile, tools: ToolPaths, kind: BackupKind, output_file: Path):
        """
        Ejecuta el volcado pedido

        Args:
            profile: Perfil de conexión
            tools: Rutas de herramientas
            kind: roles, schema o data
            output_file: Archivo de salida
        """
        if kind is BackupKind.ROLES:
            self._dump_roles(profile, tools, output_file)
        elif kind is BackupKind.SCHEMA:
            with open(output_file, 'w', encoding='utf-8') as f:
                self.run_dump(tools.pg_dump, profile, self.SCHEMA_FLAGS, Config.EXCLUDED_SCHEMAS, f)
        else:
            with open(output_file, 'w', encoding='utf-8') as f:
                self.run_dump(tools.pg_dump, profile, self.DATA_FLAGS, Config.EXCLUDED_SCHEMAS, f)

    def run_dump(
        self,
        executable: str,
        profile: ConnectionProfile,
        fixed_flags: Sequence[str],
        excluded_schemas: Sequence[str],
        sink: Optional[IO] = None,
    ) -> str:
        """
        Ejecuta pg_dump con flags fijos y lista de esquemas excluidos

        Args:
            executable: Ruta a pg_dump
            profile: Perfil de conexión (la contraseña va en PGPASSWORD)
            fixed_flags: Flags del tipo de volcado
            excluded_schemas: Esquemas a excluir
            sink: Archivo abierto de salida; si es None se devuelve el texto

        Returns:
            La salida capturada, o cadena vacía si se escribió en sink
        """
        args = [
            *profile.connection_args(),
            *fixed_flags,
            *(f"--exclude-schema={schema}" for schema in excluded_schemas),
        ]
        result = self.process_service.run_captured(
            'pg_dump', executable, args, password=profile.password, stdout=sink
        )
        return result.stdout or ""

    def _dump_roles(self, profile: ConnectionProfile, tools: ToolPaths, output_file: Path):
        """Vuelca los roles con pg_dumpall y filtra los internos"""
        args = [
            '--roles-only',
            '--no-role-passwords',
            '-h', profile.host,
            '-p', profile.port,
            '-U', profile.user,
        ]
        result = self.process_service.run_captured(
            'pg_dumpall', tools.pg_dumpall, args, password=profile.password
        )
        output_file.write_text(filter_roles(result.stdout or ""), encoding='utf-8')
