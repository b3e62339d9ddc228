"""
Servicio para invocar herramientas externas
"""
import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import IO, Optional, Sequence
from .exceptions import ConfigurationIncompleteError, ExternalToolError
from .logger import LoggerService

# Caracteres finales de stderr que se conservan en ExternalToolError
STDERR_EXCERPT_CHARS = 2000


class ProcessService:
    """Lanza procesos externos conectando streams y entorno"""

    def __init__(self):
        self.logger = LoggerService.get_logger("ProcessService")

    def run_captured(
        self,
        tool: str,
        executable: str,
        args: Sequence[str],
        password: Optional[str] = None,
        stdout: Optional[IO] = None,
        cwd: Optional[Path] = None,
        merge_stderr: bool = False,
    ) -> subprocess.CompletedProcess:
        """
        Ejecuta una herramienta capturando su salida

        Args:
            tool: Nombre de la herramienta para mensajes y errores
            executable: Ruta o nombre resoluble en PATH
            args: Argumentos en orden
            password: Contraseña a inyectar como PGPASSWORD
            stdout: Archivo abierto donde volcar la salida; si es None se captura en memoria
            cwd: Directorio de trabajo
            merge_stderr: Mezclar stderr en stdout (salida combinada)

        Returns:
            CompletedProcess con stdout (texto) si se capturó en memoria

        Raises:
            ConfigurationIncompleteError: Ruta vacía o ejecutable no encontrado
            ExternalToolError: Código de salida distinto de cero
        """
        resolved = self._resolve(tool, executable)
        self._log_command(tool, args)

        result = self._spawn(
            tool, subprocess.run,
            [resolved, *args],
            stdin=subprocess.DEVNULL,
            stdout=stdout if stdout is not None else subprocess.PIPE,
            stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
            text=True,
            env=self._build_env(password),
            cwd=str(cwd) if cwd else None,
        )

        if result.returncode != 0:
            captured = result.stdout if merge_stderr else result.stderr
            raise ExternalToolError(tool, result.returncode, self._excerpt(captured))

        if result.stderr:
            # Avisos de la herramienta (p. ej. pg_dump o supabase start)
            for line in result.stderr.strip().splitlines():
                self.logger.info(f"  {tool}: {line}")
        return result

    def run_interactive(
        self,
        tool: str,
        executable: str,
        args: Sequence[str],
        password: Optional[str] = None,
        cwd: Optional[Path] = None,
        ok_codes: Sequence[int] = (0,),
    ) -> int:
        """
        Ejecuta una herramienta heredando stdin, stdout y stderr

        Args:
            ok_codes: Códigos de salida que no se consideran error

        Returns:
            Código de salida del proceso
        """
        resolved = self._resolve(tool, executable)
        self._log_command(tool, args)

        result = self._spawn(
            tool, subprocess.run,
            [resolved, *args],
            env=self._build_env(password),
            cwd=str(cwd) if cwd else None,
        )

        if result.returncode not in ok_codes:
            raise ExternalToolError(tool, result.returncode)
        return result.returncode

    def launch_detached(self, tool: str, executable: str, args: Sequence[str]) -> subprocess.Popen:
        """
        Lanza una aplicación gráfica en su propio grupo de procesos sin esperarla
        """
        resolved = self._resolve(tool, executable)
        self._log_command(tool, args)

        kwargs = {}
        if sys.platform == "win32":
            kwargs['creationflags'] = subprocess.CREATE_NEW_PROCESS_GROUP
        else:
            kwargs['start_new_session'] = True

        return self._spawn(
            tool, subprocess.Popen,
            [resolved, *args],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            **kwargs
        )

    @staticmethod
    def _spawn(tool: str, launcher, command, **kwargs):
        """Lanza el proceso; un fallo del sistema al crearlo se reporta como error de la herramienta"""
        try:
            return launcher(command, **kwargs)
        except OSError as e:
            raise ExternalToolError(tool, None, f"no se pudo ejecutar: {e}") from e

    def _resolve(self, tool: str, executable: str) -> str:
        """Valida la ruta antes de lanzar nada"""
        if not executable:
            raise ConfigurationIncompleteError([tool])
        resolved = shutil.which(executable)
        if not resolved:
            raise ConfigurationIncompleteError(
                [tool], hint=f"revisa la ruta ('{executable}' no se encuentra en el sistema)"
            )
        return resolved

    @staticmethod
    def _build_env(password: Optional[str]) -> dict:
        env = os.environ.copy()
        if password is not None:
            env['PGPASSWORD'] = password
        return env

    def _log_command(self, tool: str, args: Sequence[str]):
        # Solo flags; los valores pueden contener datos sensibles (scripts SQL)
        flags = [arg for arg in args if arg.startswith('-')]
        self.logger.debug(f"Ejecutando {tool} {' '.join(flags)}")

    @staticmethod
    def _excerpt(text: Optional[str]) -> Optional[str]:
        if not text:
            return None
        return text[-STDERR_EXCERPT_CHARS:]
