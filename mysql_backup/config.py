"""
Configuración centralizada del sistema de backup
"""
import logging
import os
from pathlib import Path
from dotenv import load_dotenv, find_dotenv


def _env_int(name: str, default):
    """Lee un entero desde el entorno; vacío o ausente devuelve el default"""
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


class Config:
    """Configuración centralizada del sistema"""

    ENV_FILE = find_dotenv()

    # Cargar variables de entorno desde la raíz real del proyecto
    load_dotenv(ENV_FILE)

    # BASE_DIR es la raíz donde está main.py, sin importar el directorio de trabajo
    BASE_DIR = Path(__file__).resolve().parents[1]

    BACKUP_DIR = Path(os.getenv("BACKUP_DIR")) if os.getenv("BACKUP_DIR") else (BASE_DIR / "backups")
    LOG_FILE = Path(os.getenv("LOG_FILE", "/var/log/mysql-backup.log"))
    CONFIG_FILE = Path(os.getenv("CONFIG_FILE")) if os.getenv("CONFIG_FILE") else (BASE_DIR / "config.json")

    RETENTION_DAYS = _env_int("RETENTION_DAYS", 14)
    FAILURE_POLICY = os.getenv("FAILURE_POLICY", "abort")
    BACKUP_SCHEDULE = [t.strip() for t in os.getenv("BACKUP_SCHEDULE", "20:00").split(",") if t.strip()]
    DB_ENGINE = os.getenv("DB_ENGINE", "mysql")
    DUMP_TIMEOUT = _env_int("DUMP_TIMEOUT", None)

    # Ejecutables requeridos
    MYSQL_BIN = os.getenv("MYSQL_BIN", "/usr/bin/mysql")
    MYSQLDUMP_BIN = os.getenv("MYSQLDUMP_BIN", "/usr/bin/mysqldump")
    BZIP2_BIN = os.getenv("BZIP2_BIN", "/usr/bin/bzip2")

    # Conexión (vacío = usar ~/.my.cnf del cliente)
    MYSQL_HOST = os.getenv("MYSQL_HOST", "")
    MYSQL_PORT = _env_int("MYSQL_PORT", None)
    MYSQL_USER = os.getenv("MYSQL_USER", "")
    MYSQL_PASSWORD = os.getenv("MYSQL_PASSWORD", "")
    MYSQL_DEFAULTS_FILE = os.getenv("MYSQL_DEFAULTS_FILE", "")

    LOG_LEVEL = logging.INFO
    LOG_FORMAT = '%(asctime)s %(message)s'
    LOG_DATE_FORMAT = '%Y/%m/%d %H:%M:%S'

    # Esquemas internos del servidor que nunca se respaldan
    SYSTEM_SCHEMAS = ('information_schema', 'performance_schema', 'sys')

    FAILURE_POLICIES = ('abort', 'continue')

    DEFAULT_CONFIG = {
        "connection": {
            "host": "${MYSQL_HOST}",
            "port": 3306,
            "user": "${MYSQL_USER}",
            "password": "${MYSQL_PASSWORD}",
            "defaults_file": ""
        },
        "backup_settings": {
            "engine": "mysql",
            "retention_days": 14,
            "backup_dir": "",
            "log_file": "/var/log/mysql-backup.log",
            "schedule": ["20:00"],
            "failure_policy": "abort",
            "mysql_bin": "/usr/bin/mysql",
            "mysqldump_bin": "/usr/bin/mysqldump",
            "bzip2_bin": "/usr/bin/bzip2"
        }
    }
