"""
Servicio de diferencias de esquema entre proyectos
"""
import shutil
import tempfile
from pathlib import Path
from typing import Optional
from ..config import Config
from ..exceptions import ProManError
from ..factories.viewer_factory import DiffViewerFactory
from ..logger import LoggerService
from ..models import ConnectionProfile, ToolPaths
from ..process import ProcessService
from ..repositories.config_repository import ConfigRepository
from ..strategies.postgresql_strategy import PostgreSQLBackupStrategy


class DiffService:
    """Genera scripts de migración y abre comparaciones visuales de esquema"""

    TARGET_DUMP_NAME = "0001_target_schema.sql"

    def __init__(self, config_repo: ConfigRepository, process_service: Optional[ProcessService] = None):
        self.config_repo = config_repo
        self.process_service = process_service or ProcessService()
        self.logger = LoggerService.get_logger("DiffService")

    def generate_migration(self, source: ConnectionProfile, target: ConnectionProfile) -> str:
        """
        Genera el SQL que hace que el esquema del destino coincida con el del origen

        Usa una instancia local desechable del CLI de la plataforma:
        se vuelca el esquema del destino como migración inicial, se levanta
        la instancia local con él y se compara contra la conexión de origen.

        Args:
            source: Perfil de origen (esquema deseado)
            target: Perfil de destino (esquema actual)

        Returns:
            Script SQL; cadena vacía si los esquemas coinciden
        """
        tools = self.config_repo.tool_paths
        tools.require('supabase')

        temp_dir = Path(tempfile.mkdtemp(prefix="proman_supabase_"))
        try:
            self._run_supabase(tools, ['init'], cwd=temp_dir)

            migrations_dir = temp_dir / "supabase" / "migrations"
            migrations_dir.mkdir(parents=True, exist_ok=True)

            self.logger.info("Volcando el esquema actual del destino...")
            with open(migrations_dir / self.TARGET_DUMP_NAME, 'w', encoding='utf-8') as f:
                self.process_service.run_captured(
                    'supabase', tools.supabase,
                    ['db', 'dump', '--db-url', target.connection_url()],
                    password=target.password, stdout=f, cwd=temp_dir
                )

            self.logger.info("Levantando instancia local...")
            self._run_supabase(tools, ['start'], cwd=temp_dir)
            try:
                self._run_supabase(tools, ['db', 'reset'], cwd=temp_dir)

                self.logger.info("Comparando con el origen...")
                result = self.process_service.run_captured(
                    'supabase', tools.supabase,
                    ['db', 'diff', '--db-url', source.connection_url()],
                    password=source.password, cwd=temp_dir
                )
                return result.stdout or ""
            finally:
                self._stop_local_instance(tools, temp_dir)
        finally:
            shutil.rmtree(temp_dir, ignore_errors=True)

    def migration_between(self, source_id: str, target_id: str) -> str:
        """generate_migration a partir de IDs registrados"""
        source = self.config_repo.require(source_id, "origen")
        target = self.config_repo.require(target_id, "destino")
        self.logger.info(f"--- Generando diferencias de esquema {source_id} -> {target_id} ---")
        return self.generate_migration(source, target)

    def visual_diff(self, source_id: str, target_id: str):
        """
        Vuelca el esquema de ambos proyectos y los abre en el visor configurado

        Args:
            source_id: ID del proyecto de origen
            target_id: ID del proyecto de destino
        """
        source = self.config_repo.require(source_id, "origen")
        target = self.config_repo.require(target_id, "destino")
        tools = self.config_repo.tool_paths
        tools.require('pg_dump')

        viewer = DiffViewerFactory.create(self.config_repo.editor.default, self.process_service)
        strategy = PostgreSQLBackupStrategy(self.process_service)

        temp_dir = Path(tempfile.mkdtemp(prefix="proman_diff_"))
        launched = False
        try:
            source_file = temp_dir / f"{source_id}_schema.sql"
            target_file = temp_dir / f"{target_id}_schema.sql"
            for profile, output_file in ((source, source_file), (target, target_file)):
                self.logger.info(f"Volcando esquema en {output_file.name}...")
                with open(output_file, 'w', encoding='utf-8') as f:
                    strategy.run_dump(
                        tools.pg_dump, profile, strategy.SCHEMA_FLAGS, Config.EXCLUDED_SCHEMAS, f
                    )

            viewer.launch(source_file, target_file, source_id, target_id)
            launched = True
        finally:
            # Un visor desacoplado lee los archivos después de que terminemos
            if launched and viewer.detached:
                self.logger.info(f"Archivos de esquema en: {temp_dir}")
            else:
                shutil.rmtree(temp_dir, ignore_errors=True)

    def _run_supabase(self, tools: ToolPaths, args, cwd: Path):
        return self.process_service.run_captured('supabase', tools.supabase, args, cwd=cwd)

    def _stop_local_instance(self, tools: ToolPaths, cwd: Path):
        try:
            self._run_supabase(tools, ['stop'], cwd=cwd)
        except ProManError as e:
            self.logger.warning(f"No se pudo detener la instancia local: {e}")
