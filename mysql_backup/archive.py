"""
Nombres de archivos de backup

El nombre es función pura de (base de datos, fecha): así dos ejecuciones el
mismo día apuntan al mismo archivo y la segunda lo omite.
"""
import os
from datetime import datetime
from pathlib import Path
from typing import Union

ARCHIVE_SUFFIX = ".sql.bz2"
ARCHIVE_PATTERN = f"*{ARCHIVE_SUFFIX}"
TIMESTAMP_FORMAT = "%Y-%m-%d"


def run_timestamp(now: datetime = None) -> str:
    """Fecha de la ejecución en formato YYYY-MM-DD"""
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


def archive_path(directory: Union[str, Path], database_name: str, timestamp: str) -> Path:
    """
    Ruta del archivo de backup para una base de datos

    Args:
        directory: Directorio de backups
        database_name: Nombre de la base de datos
        timestamp: Fecha de la ejecución (YYYY-MM-DD)

    Returns:
        {directory}/{database_name}.{timestamp}.sql.bz2
    """
    if not database_name:
        raise ValueError("database_name must not be empty")
    if os.sep in database_name or (os.altsep and os.altsep in database_name):
        raise ValueError(f"database_name must not contain a path separator: {database_name!r}")
    return Path(directory) / f"{database_name}.{timestamp}{ARCHIVE_SUFFIX}"
