"""
Estrategia de backup "oficial" usando supabase db dump
"""
from pathlib import Path
from typing import List
from .base_strategy import BackupStrategy
from ..exceptions import ProManError
from ..models import BackupKind, BackupResult, ConnectionProfile, ToolPaths


class SupabaseBackupStrategy(BackupStrategy):
    """Delega los tres volcados en el CLI de la plataforma"""

    KIND_FLAGS = {
        BackupKind.ROLES: ['--role-only'],
        BackupKind.SCHEMA: [],
        BackupKind.DATA: ['--data-only', '--use-copy'],
    }

    def required_tools(self, kinds: List[BackupKind]) -> List[str]:
        return ['supabase']

    def dump(self, profile: ConnectionProfile, tools: ToolPaths, kind: BackupKind, output_file: Path):
        args = [
            'db', 'dump',
            '--db-url', profile.connection_url(),
            '-f', str(output_file),
            *self.KIND_FLAGS[kind],
        ]
        self.process_service.run_captured('supabase', tools.supabase, args, password=profile.password)

    def execute_backup(self, project_id, profile, tools, kinds, prefix, output_dir) -> List[BackupResult]:
        """Igual que la estrategia base, pero siempre detiene los contenedores locales al final"""
        tools.require(*self.required_tools(kinds))
        try:
            return super().execute_backup(project_id, profile, tools, kinds, prefix, output_dir)
        finally:
            self.stop_containers(tools)

    def stop_containers(self, tools: ToolPaths, cwd: Path = None):
        """Ejecuta supabase stop; un fallo solo se registra"""
        try:
            self.process_service.run_captured('supabase', tools.supabase, ['stop'], cwd=cwd)
        except ProManError as e:
            self.logger.warning(f"No se pudieron detener los contenedores locales: {e}")
