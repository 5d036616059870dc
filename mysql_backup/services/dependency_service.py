"""
Servicio que verifica los ejecutables requeridos antes de empezar
"""
import os
import shutil
from pathlib import Path
from typing import Iterable, List
from ..errors import DependencyMissingError
from ..logger import LoggerService


class DependencyService:
    """Verifica que existan los ejecutables externos"""

    def __init__(self):
        self.logger = LoggerService.get_logger("DependencyService")

    @staticmethod
    def resolve(executable: str) -> str:
        """
        Resuelve un ejecutable a una ruta existente

        Los nombres sin separador se buscan en PATH.

        Returns:
            Ruta del archivo, o cadena vacía si no existe
        """
        if os.sep not in executable:
            return shutil.which(executable) or ""
        return executable if Path(executable).is_file() else ""

    def check(self, executables: Iterable[str]) -> List[str]:
        """
        Verifica cada ejecutable en orden

        Args:
            executables: Rutas o nombres de los ejecutables

        Returns:
            Rutas resueltas

        Raises:
            DependencyMissingError: Al primer ejecutable que no existe
        """
        resolved = []
        for executable in executables:
            path = self.resolve(executable)
            if not path:
                raise DependencyMissingError(
                    f"{executable} could not be found. Please install and re-run script. Exiting.",
                    path=executable
                )
            self.logger.info(f"Confirmed {executable} is installed.")
            resolved.append(path)
        return resolved
