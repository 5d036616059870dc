"""
Servicio para limpiar backups antiguos (Single Responsibility)
"""
from datetime import datetime
from pathlib import Path
from typing import List, Optional
from ..archive import ARCHIVE_PATTERN
from ..errors import SweepFailedError
from ..logger import LoggerService
from ..models import SweepResult

SECONDS_PER_DAY = 24 * 60 * 60


class CleanupService:
    """Servicio para limpiar backups antiguos"""

    def __init__(self, retention_days: int):
        """
        Inicializa el servicio de limpieza

        Args:
            retention_days: Días de retención de backups
        """
        self.retention_days = retention_days
        self.logger = LoggerService.get_logger("CleanupService")

    def is_expired(self, mtime: float, now: datetime) -> bool:
        """
        Un archivo expira cuando su edad en días completos supera retention_days

        Con 14 días: 13 y 14 días se conservan, 15 se elimina. La edad se mide
        en segundos de época, así un cambio de horario no mueve el límite.

        Args:
            mtime: Fecha de modificación (st_mtime)
            now: Momento de referencia
        """
        age_days = int((now.timestamp() - mtime) // SECONDS_PER_DAY)
        return age_days > self.retention_days

    def find_expired(self, backup_dir: Path, now: Optional[datetime] = None) -> List[Path]:
        """
        Busca archivos *.sql.bz2 expirados (sin recursión)

        Args:
            backup_dir: Directorio de backups
            now: Momento de referencia (por defecto ahora)

        Returns:
            Rutas expiradas, ordenadas por nombre

        Raises:
            SweepFailedError: Si no se puede listar el directorio
        """
        now = now or datetime.now()
        try:
            candidates = sorted(p for p in backup_dir.glob(ARCHIVE_PATTERN) if p.is_file())
            return [
                p for p in candidates
                if self.is_expired(p.stat().st_mtime, now)
            ]
        except OSError as e:
            raise SweepFailedError(f"Cannot scan {backup_dir} for expired backups: {e}",
                                   path=str(backup_dir)) from e

    def cleanup_old_backups(self, backup_dir: Path, now: Optional[datetime] = None) -> SweepResult:
        """
        Elimina backups más antiguos que retention_days

        Los errores se registran y nunca detienen la ejecución.

        Args:
            backup_dir: Directorio de backups
            now: Momento de referencia (por defecto ahora)

        Returns:
            Archivos eliminados y errores encontrados
        """
        result = SweepResult()

        if not backup_dir.is_dir():
            self.logger.warning(f"Backup directory {backup_dir} does not exist. Nothing to sweep.")
            return result

        try:
            expired = self.find_expired(backup_dir, now)
        except SweepFailedError as e:
            self.logger.error(e.message)
            result.errors.append(e.message)
            return result

        if not expired:
            self.logger.info("No expired backups found.")
            return result

        for backup_file in expired:
            self.logger.info(f"Expired backup found. Deleting {backup_file}.")
            try:
                self._delete(backup_file)
            except SweepFailedError as e:
                self.logger.error(e.message)
                result.errors.append(e.message)
            else:
                result.deleted.append(str(backup_file))

        return result

    def _delete(self, backup_file: Path):
        try:
            backup_file.unlink()
        except FileNotFoundError:
            # Otro proceso ya lo eliminó
            self.logger.warning(f"{backup_file} was already removed.")
        except OSError as e:
            raise SweepFailedError(f"Deleting {backup_file} failed: {e}",
                                   path=str(backup_file)) from e

    def get_backup_stats(self, backup_dir: Path) -> dict:
        """
        Obtiene estadísticas de los backups

        Args:
            backup_dir: Directorio de backups

        Returns:
            Diccionario con estadísticas
        """
        stats = {
            'total_files': 0,
            'total_size_mb': 0,
            'oldest_backup': None,
            'newest_backup': None,
        }
        if not backup_dir.is_dir():
            return stats

        try:
            file_stats = [p.stat() for p in backup_dir.glob(ARCHIVE_PATTERN) if p.is_file()]
        except OSError as e:
            # Un archivo puede desaparecer entre el listado y el stat
            self.logger.error(f"Error reading backup stats from {backup_dir}: {e}")
            return stats

        if not file_stats:
            return stats

        mtimes = [s.st_mtime for s in file_stats]
        stats['total_files'] = len(file_stats)
        stats['total_size_mb'] = sum(s.st_size for s in file_stats) / (1024 * 1024)
        stats['oldest_backup'] = datetime.fromtimestamp(min(mtimes))
        stats['newest_backup'] = datetime.fromtimestamp(max(mtimes))
        return stats
