"""
Factory para crear estrategias de backup
"""
from typing import Optional
from ..models import BackupSettings, ConnectionSettings
from ..strategies.base_strategy import BackupStrategy
from ..strategies.mysql_strategy import MySQLBackupStrategy


class BackupStrategyFactory:
    """Factory para crear estrategias de backup (Factory Pattern)"""

    # Mapeo de motores a estrategias
    _strategies = {
        'mysql': MySQLBackupStrategy,
        'mariadb': MySQLBackupStrategy,
    }

    @classmethod
    def create(cls, settings: BackupSettings,
               connection: Optional[ConnectionSettings] = None) -> Optional[BackupStrategy]:
        """
        Crea una estrategia de backup según settings.engine

        Args:
            settings: Configuración de backups
            connection: Credenciales del servidor

        Returns:
            Instancia de BackupStrategy o None si el motor no es soportado
        """
        strategy_class = cls._strategies.get(settings.engine.lower())
        if strategy_class:
            return strategy_class(settings, connection)
        return None

    @classmethod
    def register_strategy(cls, engine: str, strategy_class: type):
        """
        Registra una nueva estrategia (permite extender sin modificar - Open/Closed)

        Args:
            engine: Nombre del motor
            strategy_class: Clase con constructor (settings, connection)
        """
        cls._strategies[engine.lower()] = strategy_class

    @classmethod
    def get_supported_types(cls) -> list:
        return list(cls._strategies.keys())
