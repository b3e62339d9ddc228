"""
Servicio de gestión de conexiones y rutas de herramientas
"""
from dataclasses import replace
from typing import List, Optional, Tuple
from ..exceptions import DuplicateProjectError, InvalidArgumentError
from ..factories.viewer_factory import DiffViewerFactory
from ..logger import LoggerService
from ..models import ConnectionProfile, EditorSettings
from ..prompt import InputFunc, prompt, prompt_secret
from ..repositories.config_repository import ConfigRepository


class ProjectService:
    """Alta, listado y baja de proyectos; configuración inicial"""

    def __init__(self, config_repo: ConfigRepository, input_func: Optional[InputFunc] = None):
        """
        Args:
            config_repo: Repositorio de configuración
            input_func: Función de lectura de la terminal (input por defecto)
        """
        self.config_repo = config_repo
        self.input_func = input_func
        self.logger = LoggerService.get_logger("ProjectService")

    def register(self) -> str:
        """
        Registra un proyecto de forma interactiva y guarda la configuración

        Returns:
            ID del proyecto registrado

        Raises:
            InvalidArgumentError: ID vacío
            DuplicateProjectError: El ID ya existe (no se modifica nada)
        """
        self.logger.info("Registrando una nueva conexión de proyecto")

        project_id = self._ask("Introduce un ID único para este proyecto: ")
        if not project_id:
            raise InvalidArgumentError("El ID del proyecto no puede estar vacío")
        if self.config_repo.get(project_id) is not None:
            raise DuplicateProjectError(project_id)

        profile = ConnectionProfile(
            host=self._ask("Host: "),
            port=self._ask("Puerto (por defecto: 5432): ", "5432"),
            user=self._ask("Usuario: "),
            password=prompt_secret("Contraseña: ", self.input_func),
            db_name=self._ask("Base de datos (por defecto: postgres): ", "postgres"),
            supabase_project_id=self._ask("ID de proyecto Supabase (opcional): "),
        )

        self.config_repo.add_or_replace(project_id, profile)
        self.config_repo.save()
        self.logger.info(f"✓ Proyecto {project_id} registrado")
        return project_id

    def list_connections(self) -> List[Tuple[str, ConnectionProfile]]:
        return [(pid, self.config_repo.get(pid)) for pid in self.config_repo.list_ids()]

    def remove(self, project_id: str):
        """
        Elimina un proyecto y guarda la configuración

        Raises:
            ProjectNotFoundError: El ID no está registrado
        """
        self.config_repo.require(project_id)
        self.config_repo.remove(project_id)
        self.config_repo.save()
        self.logger.info(f"✓ Proyecto {project_id} eliminado")

    def init(self):
        """
        Configura interactivamente las rutas de herramientas y el visor de diferencias

        Una respuesta vacía conserva el valor actual.
        """
        tools = self.config_repo.tool_paths
        self.logger.info("--- Configurar rutas de binarios ---")
        self.logger.info("Indica la ruta absoluta de cada herramienta")
        self.logger.info("Si ya está en el PATH basta con el nombre (p. ej. 'psql')")

        updates = {}
        for name in ('psql', 'pg_dump', 'pg_dumpall', 'supabase'):
            current = getattr(tools, name)
            updates[name] = self._ask(f"Ruta a {name} (actual: {current}): ", current)
        self.config_repo.set_tool_paths(replace(tools, **updates))

        supported = DiffViewerFactory.get_supported_editors()
        editor = self._ask(f"Visor de diferencias preferido ({', '.join(supported)}): ").lower()
        if editor in supported:
            self.config_repo.set_editor(EditorSettings(default=editor))
        elif editor:
            self.logger.warning(f"Visor no soportado, se ignora: {editor}")

        self.config_repo.save()
        self.logger.info("✓ Configuración guardada")

    def _ask(self, text: str, default: str = "") -> str:
        return prompt(text, default, self.input_func)
