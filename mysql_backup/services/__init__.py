"""
Servicios de la aplicación
"""
from .backup_service import BackupService
from .cleanup_service import CleanupService
from .dependency_service import DependencyService
from .scheduler_service import SchedulerService

__all__ = [
    'BackupService',
    'CleanupService',
    'DependencyService',
    'SchedulerService'
]
