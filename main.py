#!/usr/bin/env python3
"""
Backup automático de bases de datos MySQL/MariaDB
Punto de entrada principal

Uso:
    python main.py                        # Ejecutar backup una vez (modo cron)
    python main.py scheduler [--now]      # Programador interno
    python main.py --continue-on-failure  # No abortar al primer fallo
    python main.py --stats                # Estadísticas de backups
    python main.py --init                 # Crear archivos de configuración
"""
import sys
import signal
import argparse
from pathlib import Path

# Agregar la raíz del proyecto al path
sys.path.insert(0, str(Path(__file__).parent))

from mysql_backup.config import Config
from mysql_backup.errors import BackupError
from mysql_backup.logger import LoggerService
from mysql_backup.factories.strategy_factory import BackupStrategyFactory
from mysql_backup.repositories.config_repository import ConfigRepository
from mysql_backup.services.backup_service import BackupService
from mysql_backup.services.cleanup_service import CleanupService
from mysql_backup.services.scheduler_service import SchedulerService

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

ENV_EXAMPLE = """# Credenciales del servidor (vacío = usar ~/.my.cnf)
MYSQL_HOST=localhost
MYSQL_USER=backup_user
MYSQL_PASSWORD=tu_password_seguro

# Rutas y retención
BACKUP_DIR=
LOG_FILE=/var/log/mysql-backup.log
RETENTION_DAYS=14
FAILURE_POLICY=abort
"""


def parse_arguments(argv=None):
    """
    Parsea argumentos de línea de comandos

    Returns:
        Namespace con los argumentos parseados
    """
    parser = argparse.ArgumentParser(
        description='Backup automático de bases de datos MySQL/MariaDB',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Ejemplos:
  python main.py                          # Una ejecución (para cron)
  python main.py scheduler --now          # Servicio con ejecución inmediata
  python main.py --config /etc/backup.json
  python main.py --stats
        """
    )

    parser.add_argument(
        'mode',
        nargs='?',
        choices=['once', 'scheduler'],
        default='once',
        help='Modo de ejecución (default: once)'
    )

    parser.add_argument(
        '--config',
        type=Path,
        metavar='ARCHIVO',
        help=f'Archivo de configuración JSON (default: {Config.CONFIG_FILE})'
    )

    parser.add_argument(
        '--continue-on-failure',
        action='store_true',
        help='Registrar el fallo de una base y seguir con las demás'
    )

    parser.add_argument(
        '--stats',
        action='store_true',
        help='Mostrar estadísticas de backups'
    )

    parser.add_argument(
        '--init',
        action='store_true',
        help='Crear archivos de configuración de ejemplo'
    )

    parser.add_argument(
        '--now',
        action='store_true',
        help='Ejecutar backup inmediatamente al iniciar scheduler'
    )

    return parser.parse_args(argv)


def initialize_config(config_repo: ConfigRepository) -> list:
    """
    Crea config.json y .env.example si no existen

    Returns:
        Lista de archivos creados
    """
    created_files = []

    if not config_repo.config_file.exists() and config_repo.create_example_config():
        created_files.append(str(config_repo.config_file))

    env_example = config_repo.config_file.parent / ".env.example"
    if not env_example.exists():
        env_example.write_text(ENV_EXAMPLE, encoding='utf-8')
        created_files.append(str(env_example))

    return created_files


def show_statistics(settings):
    """Muestra estadísticas de los backups del directorio configurado"""
    logger = LoggerService.get_logger("Stats")
    stats = CleanupService(settings.retention_days).get_backup_stats(settings.backup_dir)

    logger.info(f"Backup directory: {settings.backup_dir}")
    logger.info(f"Archives: {stats['total_files']}")
    logger.info(f"Total size: {stats['total_size_mb']:.2f} MB")
    if stats['oldest_backup']:
        logger.info(f"Oldest: {stats['oldest_backup']:%Y-%m-%d %H:%M:%S}")
    if stats['newest_backup']:
        logger.info(f"Newest: {stats['newest_backup']:%Y-%m-%d %H:%M:%S}")
    logger.info(f"Retention: {settings.retention_days} days")


def run_once(backup_service: BackupService) -> int:
    """
    Ejecuta una corrida y devuelve el código de salida

    Returns:
        0 si todo salió bien, 1 si hubo un error fatal o una base falló
    """
    try:
        report = backup_service.run()
    except BackupError:
        # El mensaje ya quedó en el log
        return EXIT_FAILED
    except OSError as e:
        LoggerService.get_logger("Main").error(f"Backup aborted: {e}. Exiting.")
        return EXIT_FAILED
    return EXIT_OK if report.success else EXIT_FAILED


def _raise_interrupt(signum, frame):
    raise KeyboardInterrupt(signal.Signals(signum).name)


def main(argv=None) -> int:
    """Función principal"""
    args = parse_arguments(argv)
    config_repo = ConfigRepository(args.config)

    if args.init:
        LoggerService.configure()
        for created in initialize_config(config_repo):
            LoggerService.get_logger("Init").info(f"Created {created}")
        LoggerService.shutdown()
        return EXIT_OK

    try:
        settings = config_repo.get_backup_settings()
        connection = config_repo.get_connection_settings()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_USAGE

    if args.continue_on_failure:
        settings.failure_policy = 'continue'

    LoggerService.configure(None if args.stats else settings.log_file)
    logger = LoggerService.get_logger("Main")
    try:
        if args.stats:
            show_statistics(settings)
            return EXIT_OK

        strategy = BackupStrategyFactory.create(settings, connection)
        if strategy is None:
            logger.error(
                f"Unsupported database engine: {settings.engine} "
                f"(supported: {', '.join(BackupStrategyFactory.get_supported_types())})"
            )
            return EXIT_USAGE

        backup_service = BackupService(settings, strategy)

        if args.mode == 'scheduler':
            SchedulerService(backup_service).start(run_immediately=args.now)
            return EXIT_OK

        previous_handler = signal.signal(signal.SIGTERM, _raise_interrupt)
        try:
            return run_once(backup_service)
        finally:
            signal.signal(signal.SIGTERM, previous_handler)

    except KeyboardInterrupt as e:
        logger.error(f"Backup interrupted ({str(e) or 'SIGINT'}). Exiting.")
        return EXIT_INTERRUPTED
    finally:
        LoggerService.shutdown()


if __name__ == "__main__":
    sys.exit(main())
