"""
Visores de diferencias: una clase por herramienta con la misma interfaz launch()
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional
from ..logger import LoggerService
from ..process import ProcessService


class DiffViewer(ABC):
    """Interfaz común de los visores de diferencias"""

    executable: str = ""
    # Los visores gráficos se lanzan desacoplados y leen los archivos después
    detached: bool = False
    # diff y git diff devuelven 1 cuando hay diferencias
    ok_codes = (0,)

    def __init__(self, process_service: Optional[ProcessService] = None):
        self.logger = LoggerService.get_logger(self.__class__.__name__)
        self.process_service = process_service or ProcessService()

    @abstractmethod
    def build_args(self, file_a: Path, file_b: Path, label_a: str, label_b: str) -> List[str]:
        """Argumentos de la herramienta para comparar file_a con file_b"""
        pass

    def launch(self, file_a: Path, file_b: Path, label_a: str, label_b: str):
        """
        Abre la comparación entre dos archivos

        Args:
            file_a: Archivo de origen
            file_b: Archivo de destino
            label_a: Etiqueta del origen
            label_b: Etiqueta del destino
        """
        args = self.build_args(file_a, file_b, label_a, label_b)
        self.logger.info(f"Abriendo diferencias {label_a} -> {label_b} con {self.executable}")
        if self.detached:
            self.process_service.launch_detached(self.executable, self.executable, args)
        else:
            self.process_service.run_interactive(
                self.executable, self.executable, args, ok_codes=self.ok_codes
            )


class GitDiffViewer(DiffViewer):
    executable = "git"
    ok_codes = (0, 1)

    def build_args(self, file_a, file_b, label_a, label_b):
        return ["diff", "--no-index", str(file_a), str(file_b)]


class ZedDiffViewer(DiffViewer):
    executable = "zed"
    detached = True

    def build_args(self, file_a, file_b, label_a, label_b):
        return ["--diff", str(file_a), str(file_b)]


class VSCodeDiffViewer(DiffViewer):
    executable = "code"
    detached = True

    def build_args(self, file_a, file_b, label_a, label_b):
        return ["--diff", str(file_a), str(file_b)]


class MeldDiffViewer(DiffViewer):
    executable = "meld"
    detached = True

    def build_args(self, file_a, file_b, label_a, label_b):
        return [str(file_a), "--label", label_a, str(file_b), "--label", label_b]


class DefaultDiffViewer(DiffViewer):
    """diff unificado en la terminal"""
    executable = "diff"
    ok_codes = (0, 1)

    def build_args(self, file_a, file_b, label_a, label_b):
        return ["-u", "--label", label_a, "--label", label_b, str(file_a), str(file_b)]
