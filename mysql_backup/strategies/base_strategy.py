"""
Estrategia base para backups (Strategy Pattern)
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List
from ..logger import LoggerService
from ..models import BackupResult, BackupStatus
import time


class BackupStrategy(ABC):
    """Interfaz abstracta para estrategias de backup (Open/Closed Principle)"""

    def __init__(self):
        """Inicializa la estrategia"""
        self.logger = LoggerService.get_logger(self.__class__.__name__)

    @abstractmethod
    def check_connectivity(self) -> None:
        """
        Consulta de estado sin efectos secundarios

        Raises:
            ConnectivityFailedError: Si el servidor no responde
        """

    @abstractmethod
    def list_databases(self) -> List[str]:
        """
        Lista todas las bases de datos del servidor, en el orden que las devuelve

        Raises:
            EnumerationFailedError: Si la consulta falla
        """

    @abstractmethod
    def backup(self, database_name: str, output_file: Path) -> BackupResult:
        """
        Ejecuta el backup de la base de datos

        Args:
            database_name: Nombre de la base de datos
            output_file: Archivo de salida para el backup

        Returns:
            Resultado del backup
        """

    def execute_backup(self, database_name: str, output_file: Path) -> BackupResult:
        """
        Template method para ejecutar backup con medición de tiempo

        Un fallo nunca deja el archivo parcial en disco.

        Args:
            database_name: Nombre de la base de datos
            output_file: Archivo de salida para el backup

        Returns:
            Resultado del backup
        """
        self.logger.debug(f"Dumping {database_name} to {output_file}")
        start_time = time.time()

        try:
            result = self.backup(database_name, output_file)
        except OSError as e:
            result = BackupResult(
                database_name=database_name,
                status=BackupStatus.FAILED,
                output_file=str(output_file),
                error=str(e)
            )
        except (KeyboardInterrupt, SystemExit):
            self._remove_partial(output_file)
            raise

        result.duration_seconds = time.time() - start_time

        if result.status is BackupStatus.FAILED:
            self._remove_partial(output_file)
        else:
            file_size = output_file.stat().st_size / (1024 * 1024)  # MB
            self.logger.debug(
                f"{output_file.name}: {file_size:.2f} MB in {result.duration_seconds:.2f}s"
            )

        return result

    def _remove_partial(self, output_file: Path):
        """Elimina el archivo incompleto de un backup fallido"""
        try:
            if output_file.exists():
                output_file.unlink()
                self.logger.info(f"Removed incomplete archive {output_file}.")
        except OSError as e:
            self.logger.warning(f"Could not remove incomplete archive {output_file}: {e}")
