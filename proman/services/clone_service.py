"""
Servicio de clonado de esquema entre proyectos
"""
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional
from ..config import Config
from ..exceptions import ExternalToolError, ProManError, UserCancelledError
from ..logger import LoggerService
from ..models import BackupOptions, CloneState, ConnectionProfile
from ..process import ProcessService
from ..prompt import InputFunc, confirm
from ..repositories.config_repository import ConfigRepository
from .backup_service import BackupService
from .diff_service import DiffService


class CloneService:
    """
    Migra el esquema del destino para que coincida con el del origen

    Secuencia fija: comprobaciones, backups de seguridad de ambos proyectos,
    generación del script, revisión en el paginador, confirmación y aplicación.
    Cualquier fallo aborta antes del siguiente paso; los backups son la única
    vía de recuperación y es manual.
    """

    REQUIRED_TOOLS = ('psql', 'pg_dump', 'pg_dumpall', 'supabase')

    def __init__(
        self,
        config_repo: ConfigRepository,
        process_service: Optional[ProcessService] = None,
        backup_service: Optional[BackupService] = None,
        diff_service: Optional[DiffService] = None,
        input_func: Optional[InputFunc] = None,
        output_dir: Optional[Path] = None,
    ):
        self.config_repo = config_repo
        self.process_service = process_service or ProcessService()
        self.backup_service = backup_service or BackupService(config_repo, self.process_service)
        self.diff_service = diff_service or DiffService(config_repo, self.process_service)
        self.input_func = input_func
        self.output_dir = output_dir
        self.state = CloneState.INIT
        self.logger = LoggerService.get_logger("CloneService")

    def clone(self, source_id: str, target_id: str) -> CloneState:
        """
        Ejecuta el clonado completo

        Args:
            source_id: Proyecto cuyo esquema se copia
            target_id: Proyecto que se modifica

        Returns:
            CloneState.APPLIED o CloneState.NO_CHANGES

        Raises:
            UserCancelledError: El usuario no confirmó (no se escribe nada)
        """
        self.state = CloneState.INIT

        # 1. Comprobaciones previas
        self.logger.info("--- Comprobaciones previas ---")
        source = self.config_repo.require(source_id, "origen")
        target = self.config_repo.require(target_id, "destino")
        self.config_repo.tool_paths.require(*self.REQUIRED_TOOLS)
        self.logger.info("Comprobaciones superadas.")

        # 2. Backups de seguridad
        self.logger.info("--- Backups de seguridad ---")
        timestamp = datetime.now().strftime(Config.TIMESTAMP_FORMAT)
        for project_id in (source_id, target_id):
            self.backup_service.backup(project_id, BackupOptions(
                prefix=f"{project_id}_clone_backup_{timestamp}",
                output_dir=self.output_dir
            ))
        self.state = CloneState.BACKUPS_DONE

        # 3. Script de migración
        self.logger.info("--- Generando diferencias de esquema ---")
        script = self.diff_service.generate_migration(source, target)
        self.state = CloneState.DIFF_GENERATED

        # 4. Nada que migrar
        if not script.strip():
            self.logger.info("Los esquemas ya son idénticos. No hace falta migrar.")
            self.state = CloneState.NO_CHANGES
            return self.state

        # 5. Revisión, confirmación y aplicación
        self._review_and_apply(script, target_id, target)
        return self.state

    def _review_and_apply(self, script: str, target_id: str, target: ConnectionProfile):
        fd, script_path = tempfile.mkstemp(prefix="proman_migration_", suffix=".sql")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(script)

            self.logger.info("--- Revisión del script de migración ---")
            self._open_pager(Path(script_path))

            question = f"¿Seguro que quieres aplicar esta migración al proyecto '{target_id}'? (y/n): "
            if not confirm(question, self.input_func):
                self.state = CloneState.CANCELLED
                raise UserCancelledError("Migración cancelada por el usuario")

            self.state = CloneState.APPLYING
            self.logger.info("--- Aplicando migración ---")
            try:
                result = self.process_service.run_captured(
                    'psql', self.config_repo.tool_paths.psql,
                    [*target.connection_args(), '-c', script],
                    password=target.password, merge_stderr=True
                )
            except ExternalToolError:
                self.state = CloneState.APPLY_FAILED
                raise

            if result.stdout:
                self.logger.info(result.stdout.rstrip())
            self.state = CloneState.APPLIED
            self.logger.info("✓ Migración aplicada correctamente.")
        finally:
            Path(script_path).unlink(missing_ok=True)

    def _open_pager(self, script_path: Path):
        """Abre el script en el paginador; si falla se indica dónde está el archivo"""
        self.logger.info(f"Abriendo el script en {Config.PAGER} (pulsa 'q' para salir)...")
        try:
            self.process_service.run_interactive('pager', Config.PAGER, [str(script_path)])
        except (ProManError, OSError) as e:
            self.logger.warning(f"No se pudo abrir el paginador: {e}")
            self.logger.warning(f"El script está en: {script_path}")
