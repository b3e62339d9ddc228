"""
Operaciones delegadas en el CLI de la plataforma
"""
from typing import Optional, Sequence
from ..exceptions import ConfigurationIncompleteError
from ..logger import LoggerService
from ..process import ProcessService
from ..repositories.config_repository import ConfigRepository


class SupabaseService:
    """Login, tipos TypeScript y paso directo de subcomandos"""

    def __init__(self, config_repo: ConfigRepository, process_service: Optional[ProcessService] = None):
        self.config_repo = config_repo
        self.process_service = process_service or ProcessService()
        self.logger = LoggerService.get_logger("SupabaseService")

    def gen_types(self, project_id: str) -> str:
        """
        Genera los tipos TypeScript del esquema public

        Args:
            project_id: ID del proyecto

        Returns:
            Código TypeScript generado

        Raises:
            ConfigurationIncompleteError: Falta el ID de proyecto Supabase o la ruta al CLI
        """
        profile = self.config_repo.require(project_id)
        if not profile.supabase_project_id:
            raise ConfigurationIncompleteError(
                [f"supabase_project_id de '{project_id}'"],
                hint="añádelo al registrar el proyecto o editando el archivo de configuración"
            )
        tools = self.config_repo.tool_paths
        tools.require('supabase')

        self.logger.info(
            f"Generando tipos TypeScript para: {project_id} ({profile.supabase_project_id})"
        )
        result = self.process_service.run_captured(
            'supabase', tools.supabase,
            ['gen', 'types', '--lang', 'typescript',
             '--project-id', profile.supabase_project_id, '--schema', 'public']
        )
        return result.stdout or ""

    def login(self):
        self.passthrough(['login'])

    def passthrough(self, args: Sequence[str]) -> int:
        """
        Ejecuta supabase con los argumentos dados heredando la terminal

        Returns:
            Código de salida
        """
        tools = self.config_repo.tool_paths
        tools.require('supabase')
        return self.process_service.run_interactive('supabase', tools.supabase, list(args))
