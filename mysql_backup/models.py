"""
Modelos de datos del sistema
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from .config import Config


@dataclass
class ConnectionSettings:
    """Credenciales del servidor; todo vacío usa ~/.my.cnf"""
    host: str = ""
    port: Optional[int] = None
    user: str = ""
    password: str = ""
    defaults_file: str = ""

    def client_args(self) -> List[str]:
        """
        Argumentos de conexión comunes a mysql y mysqldump

        El password no va en argv; se pasa con MYSQL_PWD (ver client_env).
        """
        # --defaults-file tiene que ser el primer argumento
        args = []
        if self.defaults_file:
            args.append(f'--defaults-file={self.defaults_file}')
        if self.host:
            args.append(f'--host={self.host}')
        if self.port:
            args.append(f'--port={self.port}')
        if self.user:
            args.append(f'--user={self.user}')
        return args

    def client_env(self) -> Dict[str, str]:
        """Variables de entorno extra para los clientes"""
        return {'MYSQL_PWD': self.password} if self.password else {}


@dataclass
class BackupSettings:
    """Configuración de backups"""
    retention_days: int = 14
    backup_dir: Path = field(default_factory=lambda: Config.BACKUP_DIR)
    log_file: Path = field(default_factory=lambda: Config.LOG_FILE)
    schedule: List[str] = field(default_factory=lambda: ["20:00"])
    failure_policy: str = "abort"
    engine: str = "mysql"
    mysql_bin: str = "/usr/bin/mysql"
    mysqldump_bin: str = "/usr/bin/mysqldump"
    bzip2_bin: str = "/usr/bin/bzip2"
    dump_timeout: Optional[int] = None

    def __post_init__(self):
        """Validación después de inicialización"""
        self.backup_dir = Path(self.backup_dir)
        self.log_file = Path(self.log_file)
        if isinstance(self.schedule, str):
            self.schedule = [t.strip() for t in self.schedule.split(",") if t.strip()]
        if self.dump_timeout is not None:
            self.dump_timeout = int(self.dump_timeout)

        if self.retention_days < 1:
            raise ValueError("retention_days must be greater than 0")
        if self.failure_policy not in Config.FAILURE_POLICIES:
            raise ValueError(
                f"failure_policy must be one of {', '.join(Config.FAILURE_POLICIES)}"
            )
        for schedule_time in self.schedule:
            if not self._validate_time_format(schedule_time):
                raise ValueError(f"Invalid schedule time {schedule_time!r}, expected HH:MM")

    @property
    def abort_on_failure(self) -> bool:
        return self.failure_policy == "abort"

    @property
    def required_executables(self) -> List[str]:
        return [self.mysql_bin, self.mysqldump_bin, self.bzip2_bin]

    @staticmethod
    def _validate_time_format(time_str: str) -> bool:
        """Valida formato de hora HH:MM"""
        try:
            parts = time_str.split(":")
            if len(parts) != 2 or len(parts[0]) != 2 or len(parts[1]) != 2:
                return False
            hours, minutes = int(parts[0]), int(parts[1])
            return 0 <= hours <= 23 and 0 <= minutes <= 59
        except (ValueError, AttributeError):
            return False


@dataclass(frozen=True)
class RunContext:
    """Datos fijos de una ejecución; se crea una vez al inicio"""
    timestamp: str
    backup_dir: Path
    retention_days: int
    logger: logging.Logger


class BackupStatus(Enum):
    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class BackupResult:
    """Resultado de una operación de backup"""
    database_name: str
    status: BackupStatus
    output_file: Optional[str] = None
    error: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def success(self) -> bool:
        return self.status is not BackupStatus.FAILED

    def __str__(self):
        if self.status is BackupStatus.SKIPPED:
            return f"= {self.database_name}: {self.output_file} (already exists)"
        if self.status is BackupStatus.SUCCEEDED:
            return f"✓ {self.database_name}: {self.output_file} ({self.duration_seconds:.2f}s)"
        return f"✗ {self.database_name}: {self.error}"


@dataclass
class SweepResult:
    """Archivos expirados eliminados y errores de la limpieza"""
    deleted: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


@dataclass
class RunReport:
    """Resumen de una ejecución completa"""
    timestamp: str
    results: List[BackupResult] = field(default_factory=list)
    deleted_files: List[str] = field(default_factory=list)
    sweep_errors: List[str] = field(default_factory=list)
    completed: bool = False

    def _with_status(self, status: BackupStatus) -> List[BackupResult]:
        return [r for r in self.results if r.status is status]

    @property
    def succeeded(self) -> List[BackupResult]:
        return self._with_status(BackupStatus.SUCCEEDED)

    @property
    def skipped(self) -> List[BackupResult]:
        return self._with_status(BackupStatus.SKIPPED)

    @property
    def failed(self) -> List[BackupResult]:
        return self._with_status(BackupStatus.FAILED)

    @property
    def success(self) -> bool:
        return self.completed and not self.failed
