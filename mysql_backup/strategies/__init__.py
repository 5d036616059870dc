"""
Estrategias de backup para diferentes motores de BD
"""
from .base_strategy import BackupStrategy
from .mysql_strategy import MySQLBackupStrategy

__all__ = [
    'BackupStrategy',
    'MySQLBackupStrategy'
]
