"""
Repositorio para manejar configuración (Dependency Inversion)
"""
import copy
import json
import os
from pathlib import Path
from typing import Dict, Optional
from ..config import Config
from ..logger import LoggerService
from ..models import BackupSettings, ConnectionSettings


class ConfigRepository:
    """Repositorio para manejar configuración"""

    def __init__(self, config_file: Optional[Path] = None):
        """
        Inicializa el repositorio de configuración

        Args:
            config_file: Ruta al archivo de configuración (opcional)
        """
        self.config_file = Path(config_file) if config_file else Config.CONFIG_FILE
        self.logger = LoggerService.get_logger("ConfigRepository")
        self._raw_config = None

    def load(self) -> Dict:
        """
        Carga configuración desde archivo JSON

        Un archivo ausente o inválido no es fatal: se usan los valores del entorno.

        Returns:
            Diccionario con la configuración
        """
        if not self.config_file.exists():
            self.logger.debug(f"No config file at {self.config_file}, using environment defaults")
            self._raw_config = {}
            return self._raw_config

        try:
            with open(self.config_file, "r", encoding='utf-8') as f:
                self._raw_config = json.load(f)
            self.logger.debug(f"Configuration loaded from {self.config_file}")
        except json.JSONDecodeError as e:
            self.logger.error(f"Invalid JSON in {self.config_file}: {e}. Using environment defaults.")
            self._raw_config = {}
        except OSError as e:
            self.logger.error(f"Cannot read {self.config_file}: {e}. Using environment defaults.")
            self._raw_config = {}
        return self._raw_config

    def save(self, config: Dict) -> bool:
        """
        Guarda configuración en archivo JSON

        Args:
            config: Diccionario con la configuración

        Returns:
            True si se guardó exitosamente
        """
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w", encoding='utf-8') as f:
                json.dump(config, f, indent=4, ensure_ascii=False)
            self.logger.info(f"Configuration written to {self.config_file}")
            return True
        except OSError as e:
            self.logger.error(f"Cannot write {self.config_file}: {e}")
            return False

    def _section(self, name: str) -> Dict:
        if self._raw_config is None:
            self.load()
        return self._raw_config.get(name) or {}

    def get_backup_settings(self) -> BackupSettings:
        """
        Obtiene configuración de backups

        El archivo tiene prioridad sobre las variables de entorno.

        Returns:
            Objeto BackupSettings

        Raises:
            ValueError: Si algún valor es inválido
        """
        section = self._section('backup_settings')

        def pick(key, default):
            value = section.get(key)
            if isinstance(value, str):
                value = self._resolve_credential(value)
            return default if value in (None, "") else value

        return BackupSettings(
            retention_days=int(pick('retention_days', Config.RETENTION_DAYS)),
            backup_dir=Path(pick('backup_dir', Config.BACKUP_DIR)),
            log_file=Path(pick('log_file', Config.LOG_FILE)),
            schedule=pick('schedule', Config.BACKUP_SCHEDULE),
            failure_policy=pick('failure_policy', Config.FAILURE_POLICY),
            engine=pick('engine', Config.DB_ENGINE),
            mysql_bin=pick('mysql_bin', Config.MYSQL_BIN),
            mysqldump_bin=pick('mysqldump_bin', Config.MYSQLDUMP_BIN),
            bzip2_bin=pick('bzip2_bin', Config.BZIP2_BIN),
            dump_timeout=pick('dump_timeout', Config.DUMP_TIMEOUT)
        )

    def get_connection_settings(self) -> ConnectionSettings:
        """
        Obtiene las credenciales del servidor

        Returns:
            Objeto ConnectionSettings
        """
        section = self._section('connection')
        port = section.get('port', Config.MYSQL_PORT)
        return ConnectionSettings(
            host=self._resolve_credential(section.get('host', Config.MYSQL_HOST) or ''),
            port=int(port) if port else None,
            user=self._resolve_credential(section.get('user', Config.MYSQL_USER) or ''),
            password=self._resolve_credential(section.get('password', Config.MYSQL_PASSWORD) or ''),
            defaults_file=self._resolve_credential(
                section.get('defaults_file', Config.MYSQL_DEFAULTS_FILE) or ''
            )
        )

    def _resolve_credential(self, value: str) -> str:
        """
        Resuelve credencial desde variable de entorno si es necesario

        Args:
            value: Valor que puede contener referencia a variable de entorno

        Returns:
            Valor resuelto
        """
        if value.startswith("${") and value.endswith("}"):
            env_var = value[2:-1]
            resolved = os.getenv(env_var, "")
            if not resolved:
                self.logger.debug(f"Environment variable not set: {env_var}")
            return resolved
        return value

    def create_example_config(self) -> bool:
        """
        Crea un archivo de configuración de ejemplo

        Returns:
            True si se creó exitosamente
        """
        return self.save(copy.deepcopy(Config.DEFAULT_CONFIG))
