"""
Factory para crear visores de diferencias
"""
from typing import Optional
from ..process import ProcessService
from ..viewers.diff_viewers import (
    DefaultDiffViewer,
    DiffViewer,
    GitDiffViewer,
    MeldDiffViewer,
    VSCodeDiffViewer,
    ZedDiffViewer,
)


class DiffViewerFactory:
    """Factory para crear visores según el editor configurado"""

    _viewers = {
        'git': GitDiffViewer,
        'zed': ZedDiffViewer,
        'vscode': VSCodeDiffViewer,
        'meld': MeldDiffViewer,
    }

    @classmethod
    def create(cls, editor: str, process_service: Optional[ProcessService] = None) -> DiffViewer:
        """
        Crea el visor configurado

        Args:
            editor: Nombre del editor (zed, vscode, meld, git)
            process_service: Servicio de procesos a inyectar

        Returns:
            Visor correspondiente; DefaultDiffViewer si el nombre es vacío o desconocido
        """
        viewer_class = cls._viewers.get((editor or "").lower(), DefaultDiffViewer)
        return viewer_class(process_service)

    @classmethod
    def get_supported_editors(cls) -> list:
        return list(cls._viewers.keys())
