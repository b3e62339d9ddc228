"""
Servicio principal que orquesta los backups
"""
from datetime import datetime
from pathlib import Path
from typing import List, Optional
from ..config import Config
from ..exceptions import InvalidArgumentError
from ..factories.strategy_factory import BackupStrategyFactory
from ..logger import LoggerService
from ..models import BackupOptions, BackupResult
from ..process import ProcessService
from ..repositories.config_repository import ConfigRepository


class BackupService:
    """Servicio principal que orquesta los backups"""

    def __init__(self, config_repo: ConfigRepository, process_service: Optional[ProcessService] = None):
        """
        Inicializa el servicio de backup

        Args:
            config_repo: Repositorio de configuración
            process_service: Servicio de procesos (inyectable en tests)
        """
        self.config_repo = config_repo
        self.process_service = process_service or ProcessService()
        self.logger = LoggerService.get_logger("BackupService")

    def backup(self, project_id: str, options: Optional[BackupOptions] = None) -> List[BackupResult]:
        """
        Realiza el backup de un proyecto registrado

        Args:
            project_id: ID del proyecto
            options: Tipos, prefijo, modo oficial y directorio de salida

        Returns:
            Lista de resultados, uno por archivo generado

        Raises:
            ProjectNotFoundError: Proyecto no registrado
            ConfigurationIncompleteError: Herramientas sin configurar
            ExternalToolError: Fallo de un volcado (aborta los restantes)
        """
        options = options or BackupOptions()
        profile = self.config_repo.require(project_id)

        mode = 'official' if options.official else 'pg_dump'
        strategy = BackupStrategyFactory.create(mode, self.process_service)
        if strategy is None:
            raise InvalidArgumentError(f"Modo de backup no soportado: {mode}")

        prefix = options.prefix or self.default_prefix(project_id)
        output_dir = Path(options.output_dir) if options.output_dir else Config.BACKUP_DIR
        kinds = options.selected_kinds()

        self.logger.info("=" * 70)
        self.logger.info(
            f"BACKUP DE '{project_id}' ({', '.join(kind.value for kind in kinds)}) - modo {mode}"
        )
        self.logger.info("=" * 70)

        results = strategy.execute_backup(
            project_id, profile, self.config_repo.tool_paths, kinds, prefix, output_dir
        )

        self._print_summary(results)
        return results

    @staticmethod
    def default_prefix(project_id: str, now: Optional[datetime] = None) -> str:
        """Prefijo por defecto: {id}_{timestamp}"""
        timestamp = (now or datetime.now()).strftime(Config.TIMESTAMP_FORMAT)
        return f"{project_id}_{timestamp}"

    def _print_summary(self, results: List[BackupResult]):
        total_time = sum(r.duration_seconds for r in results)
        self.logger.info("-" * 70)
        for result in results:
            self.logger.info(str(result))
        self.logger.info(f"Backup completo: {len(results)} archivo(s) en {total_time:.2f}s")
