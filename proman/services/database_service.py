"""
Ejecución de archivos SQL contra un proyecto
"""
from pathlib import Path
from typing import Optional
from ..exceptions import InvalidArgumentError
from ..logger import LoggerService
from ..process import ProcessService
from ..repositories.config_repository import ConfigRepository


class DatabaseService:
    """Operaciones directas con psql"""

    def __init__(self, config_repo: ConfigRepository, process_service: Optional[ProcessService] = None):
        self.config_repo = config_repo
        self.process_service = process_service or ProcessService()
        self.logger = LoggerService.get_logger("DatabaseService")

    def exec_file(self, project_id: str, sql_file: Path):
        """
        Ejecuta un archivo SQL con psql -f mostrando su salida

        Args:
            project_id: ID del proyecto
            sql_file: Archivo SQL

        Raises:
            InvalidArgumentError: El archivo no existe
            ProjectNotFoundError: Proyecto no registrado
            ConfigurationIncompleteError: psql sin configurar
        """
        sql_file = Path(sql_file)
        if not sql_file.is_file():
            raise InvalidArgumentError(f"No se encontró el archivo: {sql_file}")

        profile = self.config_repo.require(project_id)
        tools = self.config_repo.tool_paths
        tools.require('psql')

        self.logger.info(f"Ejecutando {sql_file} en '{project_id}'...")
        self.process_service.run_interactive(
            'psql', tools.psql,
            [*profile.connection_args(), '-f', str(sql_file)],
            password=profile.password
        )
        self.logger.info("✓ Ejecución completada")
