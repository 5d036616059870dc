"""
Excepciones del dominio de backup

Cada fallo esperado del proceso se mapea a una excepción con su ErrorKind,
así los llamadores pueden decidir sin parsear el texto del log.
"""
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Tipos de error del proceso de backup"""
    DEPENDENCY_MISSING = "dependency_missing"
    CONNECTIVITY_FAILED = "connectivity_failed"
    ENUMERATION_FAILED = "enumeration_failed"
    DUMP_FAILED = "dump_failed"
    SWEEP_FAILED = "sweep_failed"


class BackupError(RuntimeError):
    """Error base de todas las fallas del proceso de backup"""

    kind: ErrorKind = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DependencyMissingError(BackupError):
    """Falta un ejecutable requerido"""

    kind = ErrorKind.DEPENDENCY_MISSING

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class ConnectivityFailedError(BackupError):
    """El servidor no responde o las credenciales son inválidas"""

    kind = ErrorKind.CONNECTIVITY_FAILED


class EnumerationFailedError(BackupError):
    """No se pudo obtener la lista de bases de datos"""

    kind = ErrorKind.ENUMERATION_FAILED


class DumpFailedError(BackupError):
    """Falló el volcado de una base de datos"""

    kind = ErrorKind.DUMP_FAILED

    def __init__(self, message: str, database_name: str, output_file: Optional[str] = None):
        super().__init__(message)
        self.database_name = database_name
        self.output_file = output_file


class SweepFailedError(BackupError):
    """Falló la eliminación o el listado de backups expirados"""

    kind = ErrorKind.SWEEP_FAILED

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
