"""
Estrategia base para backups (Strategy Pattern)
"""
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional
from ..exceptions import OutputWriteError, ProManError
from ..logger import LoggerService
from ..models import BackupKind, BackupResult, ConnectionProfile, ToolPaths
from ..process import ProcessService


class BackupStrategy(ABC):
    """Interfaz abstracta para estrategias de backup (Open/Closed Principle)"""

    def __init__(self, process_service: Optional[ProcessService] = None):
        """
        Inicializa la estrategia

        Args:
            process_service: Servicio de procesos (inyectable en tests)
        """
        self.logger = LoggerService.get_logger(self.__class__.__name__)
        self.process_service = process_service or ProcessService()

    @abstractmethod
    def required_tools(self, kinds: List[BackupKind]) -> List[str]:
        """
        Herramientas que deben estar configuradas para los tipos pedidos

        Args:
            kinds: Tipos de volcado seleccionados

        Returns:
            Nombres de campos de ToolPaths
        """
        pass

    @abstractmethod
    def dump(self, profile: ConnectionProfile, tools: ToolPaths, kind: BackupKind, output_file: Path):
        """
        Genera un volcado en output_file

        Args:
            profile: Perfil de conexión
            tools: Rutas de herramientas
            kind: Tipo de volcado
            output_file: Archivo de salida

        Raises:
            ProManError: Si el volcado falla
        """
        pass

    def execute_backup(
        self,
        project_id: str,
        profile: ConnectionProfile,
        tools: ToolPaths,
        kinds: List[BackupKind],
        prefix: str,
        output_dir: Path,
    ) -> List[BackupResult]:
        """
        Template method: valida herramientas y ejecuta cada volcado midiendo el tiempo

        El primer fallo aborta los pasos restantes.

        Returns:
            Un BackupResult por archivo generado
        """
        tools.require(*self.required_tools(kinds))
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputWriteError(f"No se pudo crear el directorio de salida {output_dir}: {e}") from e

        results = []
        for kind in kinds:
            output_file = output_dir / f"{prefix}_{kind.value}.sql"
            self.logger.info(f"Volcando {kind.value} en {output_file}...")
            start_time = time.time()
            previous = self._file_signature(output_file)

            try:
                self.dump(profile, tools, kind, output_file)
            except (ProManError, OSError) as e:
                # Limpiar archivo parcial solo si este paso lo tocó
                if output_file.exists() and self._file_signature(output_file) != previous:
                    output_file.unlink()
                self.logger.error(f"Backup de {kind.value} fallido: {e}")
                if isinstance(e, OSError):
                    raise OutputWriteError(f"No se pudo escribir {output_file}: {e}") from e
                raise

            result = BackupResult(
                project_id=project_id,
                kind=kind,
                output_file=str(output_file),
                duration_seconds=time.time() - start_time
            )
            file_size = output_file.stat().st_size / (1024 * 1024) if output_file.exists() else 0  # MB
            self.logger.info(
                f"Backup exitoso: {output_file.name} "
                f"({file_size:.2f} MB, {result.duration_seconds:.2f}s)"
            )
            results.append(result)

        return results

    @staticmethod
    def _file_signature(path: Path) -> Optional[tuple]:
        """Tamaño y fecha de modificación, o None si el archivo no existe"""
        try:
            stat = path.stat()
        except FileNotFoundError:
            return None
        return stat.st_size, stat.st_mtime_ns
