"""
Jerarquía de errores de proman

Todos los errores llegan sin capturar hasta main.py, que los muestra y
termina con código distinto de cero.
"""
from typing import Iterable, Optional


class ProManError(Exception):
    """Error base de la aplicación"""


class ConfigReadError(ProManError):
    """No se pudo leer el archivo de configuración"""


class ConfigParseError(ProManError):
    """El archivo de configuración no es JSON válido"""


class ConfigWriteError(ProManError):
    """No se pudo escribir el archivo de configuración"""


class ProjectNotFoundError(ProManError):
    """Se referenció un ID de proyecto no registrado"""

    def __init__(self, project_id: str, role: str = ""):
        self.project_id = project_id
        label = f"proyecto {role}" if role else "proyecto"
        super().__init__(f"No se encontró el {label} con ID '{project_id}'")


class DuplicateProjectError(ProManError):
    """El ID de proyecto ya existe en la configuración"""

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Ya existe un proyecto con ID '{project_id}'")


class ConfigurationIncompleteError(ProManError):
    """Falta una ruta de herramienta u otro dato necesario"""

    def __init__(self, missing: Iterable[str], hint: str = "ejecuta 'proman init'"):
        self.missing = list(missing)
        message = f"Sin configurar: {', '.join(self.missing)}"
        if hint:
            message += f". Para corregirlo, {hint}"
        super().__init__(message)


class ExternalToolError(ProManError):
    """Una herramienta externa terminó con código distinto de cero"""

    def __init__(self, tool: str, exit_code: Optional[int], stderr_excerpt: Optional[str] = None):
        self.tool = tool
        self.exit_code = exit_code
        self.stderr_excerpt = stderr_excerpt
        message = f"{tool} terminó con código {exit_code}"
        if stderr_excerpt:
            message += f": {stderr_excerpt.strip()}"
        super().__init__(message)


class InvalidArgumentError(ProManError):
    """Argumento o entrada del usuario inválido"""


class UserCancelledError(ProManError):
    """El usuario rechazó la confirmación; no es un fallo"""


class OutputWriteError(ProManError):
    """No se pudo crear un archivo o directorio de salida"""
