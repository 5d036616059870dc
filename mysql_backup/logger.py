"""
Servicio de logging siguiendo principio Single Responsibility

Todas las líneas salen como "<YYYY/MM/DD HH:MM:SS> <mensaje>" a consola y al
archivo de log (modo append).
"""
import logging
import sys
from pathlib import Path
from typing import Optional
from .config import Config


class LoggerService:
    """Servicio centralizado de logging"""

    ROOT_NAME = "mysql_backup"

    _loggers = {}
    _handlers = []

    @classmethod
    def configure(cls, log_file: Optional[Path] = None, level: int = Config.LOG_LEVEL) -> logging.Logger:
        """
        Configura los handlers de consola y archivo sobre el logger raíz del paquete

        Args:
            log_file: Archivo de log; None usa solo la consola
            level: Nivel de logging

        Returns:
            Logger raíz del paquete
        """
        cls.shutdown()

        root = logging.getLogger(cls.ROOT_NAME)
        root.setLevel(level)
        root.propagate = False

        formatter = logging.Formatter(Config.LOG_FORMAT, datefmt=Config.LOG_DATE_FORMAT)

        # Handler para consola
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)
        cls._handlers.append(console_handler)

        # Handler para archivo
        if log_file is not None:
            try:
                Path(log_file).parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
            except OSError as e:
                root.warning(f"Cannot open log file {log_file} ({e}). Logging to console only.")
            else:
                file_handler.setLevel(level)
                file_handler.setFormatter(formatter)
                root.addHandler(file_handler)
                cls._handlers.append(file_handler)

        return root

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Obtiene o crea un logger con el nombre especificado

        Args:
            name: Nombre del logger

        Returns:
            Logger hijo del logger raíz del paquete
        """
        if name in cls._loggers:
            return cls._loggers[name]

        logger = logging.getLogger(f"{cls.ROOT_NAME}.{name}")
        cls._loggers[name] = logger
        return logger

    @classmethod
    def shutdown(cls):
        """Cierra y retira los handlers instalados por configure()"""
        root = logging.getLogger(cls.ROOT_NAME)
        for handler in cls._handlers:
            try:
                handler.flush()
                handler.close()
            finally:
                root.removeHandler(handler)
        cls._handlers = []
