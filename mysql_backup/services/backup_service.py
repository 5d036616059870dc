"""
Servicio principal que orquesta los backups

Flujo de una ejecución:
1. Verificar ejecutables requeridos
2. Crear el directorio de backups si no existe
3. Verificar conectividad con el servidor
4. Listar bases de datos (sin esquemas del sistema)
5. Backup de cada base, en orden, omitiendo las que ya tienen archivo del día
6. Eliminar backups expirados
"""
from datetime import datetime
from typing import List, Optional
from ..archive import archive_path, run_timestamp
from ..config import Config
from ..errors import BackupError, DumpFailedError
from ..logger import LoggerService
from ..models import BackupSettings, BackupResult, BackupStatus, RunContext, RunReport
from ..strategies.base_strategy import BackupStrategy
from .cleanup_service import CleanupService
from .dependency_service import DependencyService


class BackupService:
    """Servicio principal que orquesta los backups"""

    def __init__(self, settings: BackupSettings, strategy: BackupStrategy,
                 dependency_service: Optional[DependencyService] = None,
                 cleanup_service: Optional[CleanupService] = None):
        """
        Inicializa el servicio de backup

        Args:
            settings: Configuración de backups
            strategy: Estrategia que habla con el servidor
            dependency_service: Verificador de ejecutables (opcional)
            cleanup_service: Servicio de limpieza (opcional)
        """
        self.settings = settings
        self.strategy = strategy
        self.logger = LoggerService.get_logger("BackupService")
        self.dependency_service = dependency_service or DependencyService()
        self.cleanup_service = cleanup_service or CleanupService(settings.retention_days)

    def run(self, now: Optional[datetime] = None) -> RunReport:
        """
        Ejecuta una corrida completa

        Args:
            now: Momento de la ejecución; fija la fecha de los archivos y la
                referencia de la limpieza. Por defecto la hora actual.

        Returns:
            Reporte de la ejecución

        Raises:
            BackupError: En cualquier error fatal, ya registrado en el log
        """
        context = RunContext(
            timestamp=run_timestamp(now),
            backup_dir=self.settings.backup_dir,
            retention_days=self.settings.retention_days,
            logger=self.logger
        )
        report = RunReport(timestamp=context.timestamp)

        self.logger.info("**** STARTING BACKUP PROCESS ****")

        try:
            self.dependency_service.check(self.settings.required_executables)
            self._prepare_backup_dir(context)

            self.strategy.check_connectivity()
            self.logger.info("Confirmed connectivity to MySQL process.")

            self.logger.info("Starting backup process.")
            for database_name in self._enumerate_databases():
                result = self._backup_single_database(context, database_name)
                report.results.append(result)

                if result.status is BackupStatus.FAILED and self.settings.abort_on_failure:
                    raise DumpFailedError(
                        f"Writing {result.output_file or database_name} failed. Exiting.",
                        database_name=database_name,
                        output_file=result.output_file
                    )

        except BackupError as e:
            self.logger.error(e.message)
            raise

        sweep = self.cleanup_service.cleanup_old_backups(context.backup_dir, now)
        report.deleted_files = sweep.deleted
        report.sweep_errors = sweep.errors
        report.completed = True

        self._print_summary(report)
        return report

    def _prepare_backup_dir(self, context: RunContext):
        """Crea el directorio de backups si no existe"""
        if not context.backup_dir.is_dir():
            self.logger.info("Creating backup directory.")
            context.backup_dir.mkdir(parents=True, exist_ok=True)
        else:
            self.logger.info("Backup directory exists. Skipping creating directory.")

    def _enumerate_databases(self) -> List[str]:
        """
        Lista las bases de datos a respaldar

        Returns:
            Nombres sin los esquemas del sistema, en el orden del servidor

        Raises:
            EnumerationFailedError: Si la consulta falla
        """
        databases = [
            name for name in self.strategy.list_databases()
            if name and name not in Config.SYSTEM_SCHEMAS
        ]
        if databases:
            self.logger.info(f"Found {len(databases)} database(s) to back up: {', '.join(databases)}")
        else:
            self.logger.info("No databases to back up.")
        return databases

    def _backup_single_database(self, context: RunContext, database_name: str) -> BackupResult:
        """
        Realiza backup de una base de datos

        Args:
            context: Datos de la ejecución
            database_name: Nombre de la base de datos

        Returns:
            Resultado del backup
        """
        try:
            output_file = archive_path(context.backup_dir, database_name, context.timestamp)
        except ValueError as e:
            # Nombre que no se puede usar como archivo: falla como cualquier volcado
            self.logger.error(f"Backup of {database_name} failed: {e}")
            if not self.settings.abort_on_failure:
                self.logger.error(f"Backup of {database_name} failed. Continuing with next database.")
            return BackupResult(
                database_name=database_name,
                status=BackupStatus.FAILED,
                error=str(e)
            )

        if output_file.exists():
            self.logger.info(f"{output_file} already exists")
            return BackupResult(
                database_name=database_name,
                status=BackupStatus.SKIPPED,
                output_file=str(output_file)
            )

        result = self.strategy.execute_backup(database_name, output_file)

        if result.status is BackupStatus.SUCCEEDED:
            self.logger.info(f"Database backup of {database_name} successfully written to {output_file}.")
        else:
            self.logger.error(f"Backup of {database_name} failed: {result.error}")
            if not self.settings.abort_on_failure:
                self.logger.error(f"Writing {output_file} failed. Continuing with next database.")

        return result

    def _print_summary(self, report: RunReport):
        """
        Imprime resumen de la operación de backup

        Args:
            report: Reporte de la ejecución
        """
        self.logger.info(
            f"Backups written: {len(report.succeeded)}, "
            f"skipped: {len(report.skipped)}, "
            f"failed: {len(report.failed)}, "
            f"expired deleted: {len(report.deleted_files)}"
        )
        for result in report.failed:
            self.logger.warning(f"FAILED: {result.database_name} ({result.error})")
        if report.sweep_errors:
            self.logger.warning(f"{len(report.sweep_errors)} expired backup(s) could not be deleted.")

        self.logger.info("**** BACKUP PROCESS COMPLETE ****")
