"""
Repositorio para manejar configuración (Dependency Inversion)
"""
import copy
import json
from pathlib import Path
from typing import Dict, List, Optional
from ..config import Config
from ..exceptions import ConfigParseError, ConfigReadError, ConfigWriteError, ProjectNotFoundError
from ..logger import LoggerService
from ..models import ConnectionProfile, EditorSettings, ToolPaths


class ConfigRepository:
    """Repositorio de perfiles de conexión, rutas de herramientas y editor"""

    def __init__(self, config_file: Optional[Path] = None):
        """
        Inicializa el repositorio de configuración

        Args:
            config_file: Ruta al archivo de configuración (opcional)
        """
        self.config_file = Path(config_file) if config_file else Config.CONFIG_FILE
        self.logger = LoggerService.get_logger("ConfigRepository")
        self._raw_config: Dict = {}
        self._connections: Dict[str, ConnectionProfile] = {}
        self.tool_paths = ToolPaths()
        self.editor = EditorSettings()

    def load(self) -> Dict:
        """
        Carga configuración desde archivo JSON

        Un archivo inexistente equivale a una configuración vacía.

        Returns:
            Diccionario con la configuración

        Raises:
            ConfigReadError: Error de E/S al leer
            ConfigParseError: JSON mal formado o con estructura inesperada
        """
        if not self.config_file.exists():
            self.logger.debug(f"El archivo de configuración no existe: {self.config_file}")
            raw = copy.deepcopy(Config.DEFAULT_CONFIG)
        else:
            try:
                with open(self.config_file, "r", encoding='utf-8') as f:
                    raw = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigParseError(f"Error al parsear {self.config_file}: {e}") from e
            except OSError as e:
                raise ConfigReadError(f"Error al leer {self.config_file}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigParseError(f"{self.config_file} debe contener un objeto JSON")

        connections = raw.get('connections') or {}
        binaries = raw.get('binaries') or {}
        editor = raw.get('editor') or {}
        if not isinstance(connections, dict) or not isinstance(binaries, dict) or not isinstance(editor, dict):
            raise ConfigParseError(f"Estructura inválida en {self.config_file}")

        self._connections = {}
        for project_id, params in connections.items():
            if not isinstance(params, dict):
                raise ConfigParseError(f"Conexión inválida para el proyecto '{project_id}'")
            self._connections[project_id] = ConnectionProfile.from_dict(params)
        self.tool_paths = ToolPaths.from_dict(binaries)
        self.editor = EditorSettings.from_dict(editor)
        self._raw_config = raw

        self.logger.debug(f"Configuración cargada: {self.config_file} ({len(self._connections)} proyecto(s))")
        return raw

    def save(self):
        """
        Guarda configuración en archivo JSON (sobrescritura directa)

        Raises:
            ConfigWriteError: Error de E/S al escribir
        """
        config = self.to_dict()
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w", encoding='utf-8') as f:
                json.dump(config, f, indent=4, ensure_ascii=False)
        except OSError as e:
            raise ConfigWriteError(f"Error al guardar {self.config_file}: {e}") from e
        self._raw_config = config
        self.logger.debug(f"Configuración guardada: {self.config_file}")

    def ensure_exists(self) -> bool:
        """
        Crea el archivo de configuración vacío si aún no existe

        Returns:
            True si se creó el archivo
        """
        if self.config_file.exists():
            return False
        self.logger.info(f"No se encontró configuración. Creando una nueva en: {self.config_file}")
        self.save()
        return True

    def to_dict(self) -> Dict:
        """Serializa el estado actual conservando claves desconocidas"""
        config = {key: value for key, value in self._raw_config.items()
                  if key not in ('connections', 'binaries', 'editor')}
        config['connections'] = {pid: profile.to_dict() for pid, profile in self._connections.items()}
        config['binaries'] = self.tool_paths.to_dict()
        config['editor'] = self.editor.to_dict()
        return config

    def add_or_replace(self, project_id: str, profile: ConnectionProfile):
        self._connections[project_id] = profile

    def get(self, project_id: str) -> Optional[ConnectionProfile]:
        return self._connections.get(project_id)

    def require(self, project_id: str, role: str = "") -> ConnectionProfile:
        """
        Obtiene un perfil registrado

        Args:
            project_id: ID del proyecto
            role: Papel del proyecto en el mensaje de error (origen, destino)

        Raises:
            ProjectNotFoundError: Si el ID no está registrado
        """
        profile = self._connections.get(project_id)
        if profile is None:
            raise ProjectNotFoundError(project_id, role)
        return profile

    def remove(self, project_id: str):
        self._connections.pop(project_id, None)

    def list_ids(self) -> List[str]:
        return list(self._connections)

    def set_tool_paths(self, paths: ToolPaths):
        self.tool_paths = paths

    def set_editor(self, editor: EditorSettings):
        self.editor = editor
