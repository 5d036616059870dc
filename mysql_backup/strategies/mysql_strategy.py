"""
Estrategia de backup para MySQL/MariaDB
"""
import os
import subprocess
import tempfile
from time import monotonic
from pathlib import Path
from typing import List, Optional
from .base_strategy import BackupStrategy
from ..errors import ConnectivityFailedError, EnumerationFailedError
from ..models import BackupSettings, BackupResult, BackupStatus, ConnectionSettings

EXIT_GRACE_SECONDS = 5


class MySQLBackupStrategy(BackupStrategy):
    """Estrategia de backup para MySQL/MariaDB usando mysql, mysqldump y bzip2"""

    def __init__(self, settings: BackupSettings, connection: Optional[ConnectionSettings] = None):
        """
        Inicializa la estrategia

        Args:
            settings: Configuración de backups (rutas de ejecutables, timeout)
            connection: Credenciales; None usa ~/.my.cnf
        """
        super().__init__()
        self.mysql_bin = settings.mysql_bin
        self.mysqldump_bin = settings.mysqldump_bin
        self.bzip2_bin = settings.bzip2_bin
        self.timeout = settings.dump_timeout
        self.connection = connection or ConnectionSettings()

    def _env(self) -> dict:
        env = os.environ.copy()
        env.update(self.connection.client_env())
        return env

    def _mysql(self, *args: str) -> List[str]:
        return [self.mysql_bin, *self.connection.client_args(), *args]

    def check_connectivity(self) -> None:
        """Ejecuta `mysql -e status` descartando la salida"""
        try:
            result = subprocess.run(
                self._mysql('-e', 'status'),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                env=self._env(),
                timeout=60
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise ConnectivityFailedError(
                "Connection attempt to MySQL failed. Check service and verify credentials. Exiting."
            ) from e

        if result.returncode != 0:
            self.logger.debug(f"mysql status: {result.stderr.strip()}")
            raise ConnectivityFailedError(
                "Connection attempt to MySQL failed. Check service and verify credentials. Exiting."
            )

    def list_databases(self) -> List[str]:
        """
        Ejecuta SHOW DATABASES sin encabezado

        Returns:
            Nombres en el orden devuelto por el servidor
        """
        try:
            result = subprocess.run(
                self._mysql('--batch', '--skip-column-names', '-e', 'SHOW DATABASES;'),
                capture_output=True,
                text=True,
                env=self._env(),
                timeout=60
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise EnumerationFailedError(f"Listing databases failed: {e}. Exiting.") from e

        if result.returncode != 0:
            raise EnumerationFailedError(
                f"Listing databases failed: {result.stderr.strip()}. Exiting."
            )

        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def backup(self, database_name: str, output_file: Path) -> BackupResult:
        """
        Ejecuta `mysqldump ... | bzip2 > output_file`

        Args:
            database_name: Nombre de la base de datos
            output_file: Archivo de salida para el backup

        Returns:
            Resultado del backup; FAILED si cualquiera de los dos procesos falla
        """
        cmd = [
            self.mysqldump_bin,
            *self.connection.client_args(),
            '--single-transaction',  # Snapshot consistente sin bloquear InnoDB
            '--quick',               # Para tablas grandes
            '--routines',            # Incluir procedures y functions
            '--events',              # Incluir eventos
            '--databases',           # Incluye CREATE DATABASE / USE
            database_name
        ]

        # stderr de mysqldump a archivo temporal: un PIPE sin leer puede bloquear el pipeline
        with open(output_file, 'wb') as f, tempfile.TemporaryFile() as dump_err:
            deadline = monotonic() + self.timeout if self.timeout else None
            dump = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=dump_err, env=self._env())
            compress = None
            try:
                compress = subprocess.Popen(
                    [self.bzip2_bin, '-c'],
                    stdin=dump.stdout,
                    stdout=f,
                    stderr=subprocess.PIPE
                )
                # Solo bzip2 debe tener el extremo de lectura
                dump.stdout.close()

                _, bzip2_err = compress.communicate(timeout=self.timeout)
                dump.wait(timeout=self._remaining(deadline))
            except subprocess.TimeoutExpired:
                self._terminate(dump, compress)
                return BackupResult(
                    database_name=database_name,
                    status=BackupStatus.FAILED,
                    output_file=str(output_file),
                    error=f"Timeout: dump took longer than {self.timeout}s"
                )
            except BaseException:
                # Interrupción o fallo al lanzar bzip2: ningún hijo queda vivo
                self._terminate(dump, compress)
                raise

            dump_err.seek(0)
            dump_stderr = dump_err.read().decode('utf-8', errors='replace').strip()

        if dump.returncode != 0:
            return BackupResult(
                database_name=database_name,
                status=BackupStatus.FAILED,
                output_file=str(output_file),
                error=f"mysqldump exited with {dump.returncode}: {dump_stderr}"
            )
        if compress.returncode != 0:
            return BackupResult(
                database_name=database_name,
                status=BackupStatus.FAILED,
                output_file=str(output_file),
                error=f"bzip2 exited with {compress.returncode}: "
                      f"{bzip2_err.decode('utf-8', errors='replace').strip()}"
            )

        return BackupResult(
            database_name=database_name,
            status=BackupStatus.SUCCEEDED,
            output_file=str(output_file)
        )

    @staticmethod
    def _remaining(deadline: Optional[float]) -> Optional[float]:
        """Tiempo restante del límite total, con margen para que mysqldump termine de cerrar"""
        if deadline is None:
            return None
        return max(deadline - monotonic(), EXIT_GRACE_SECONDS)

    @staticmethod
    def _terminate(*processes):
        """Mata y espera los procesos del pipeline que se hayan lanzado"""
        for process in processes:
            if process is None:
                continue
            if process.stdout and not process.stdout.closed:
                process.stdout.close()
            process.kill()
            process.wait()
