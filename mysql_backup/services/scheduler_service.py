"""
Servicio de programación de tareas de backup

Alternativa a cron para hosts sin programador: una ejecución a la vez, en el
mismo proceso.
"""
import schedule
import time
import signal
import sys
from ..errors import BackupError
from ..logger import LoggerService
from .backup_service import BackupService


class SchedulerService:
    """Servicio para programar y ejecutar backups automáticos"""

    def __init__(self, backup_service: BackupService):
        """
        Inicializa el servicio de programación

        Args:
            backup_service: Servicio de backup a ejecutar
        """
        self.backup_service = backup_service
        self.logger = LoggerService.get_logger("SchedulerService")
        self.running = False

        # Registrar manejadores de señales para shutdown graceful
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def start(self, run_immediately: bool = False):
        """
        Inicia el programador de tareas

        Args:
            run_immediately: Si es True, ejecuta un backup inmediatamente al iniciar
        """
        settings = self.backup_service.settings

        for schedule_time in settings.schedule:
            schedule.every().day.at(schedule_time).do(self._run_backup_job)

        self.logger.info("Backup scheduler started.")
        for schedule_time in settings.schedule:
            self.logger.info(f"Daily backup at {schedule_time}")
        self.logger.info(f"Retention: {settings.retention_days} days")
        self.logger.info(f"Next run: {self.get_next_run()}")

        if run_immediately:
            self._run_backup_job()

        # Loop principal
        self.running = True
        while self.running:
            schedule.run_pending()
            time.sleep(30)

    def _run_backup_job(self):
        """Ejecuta una corrida; un error fatal no detiene el servicio"""
        try:
            report = self.backup_service.run()
            if not report.success:
                self.logger.warning(
                    f"Backup run finished with {len(report.failed)} failed database(s)."
                )
        except BackupError as e:
            # Ya registrado por BackupService; la próxima ejecución es el reintento
            self.logger.warning(f"Backup run aborted ({e.kind.value}). Next run: {self.get_next_run()}")
        except OSError as e:
            self.logger.error(f"Backup run aborted: {e}", exc_info=True)

    def _signal_handler(self, signum, frame):
        """
        Manejador de señales para shutdown graceful

        Args:
            signum: Número de señal
            frame: Frame actual
        """
        try:
            signal_name = signal.Signals(signum).name
        except ValueError:
            signal_name = str(signum)

        self.logger.info(f"Received {signal_name}")
        self._shutdown()

    def _shutdown(self):
        """Detiene el servicio de forma ordenada"""
        self.logger.info("Stopping backup scheduler.")
        self.running = False
        schedule.clear()
        sys.exit(0)

    def get_next_run(self) -> str:
        """
        Obtiene la fecha de la próxima ejecución

        Returns:
            Fecha formateada o aviso si no hay ejecuciones programadas
        """
        next_run = schedule.next_run()
        if next_run:
            return next_run.strftime('%Y-%m-%d %H:%M:%S')
        return "no runs scheduled"
