"""
Tests del punto de entrada (códigos de salida y log en archivo)
"""
import json
import logging
import signal
import unittest
from pathlib import Path
from unittest.mock import patch
import tempfile
import shutil
import sys

# Agregar la raíz del proyecto al path
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

import main
from mysql_backup.logger import LoggerService
from mysql_backup.models import BackupSettings
from mysql_backup.services.backup_service import BackupService
from test_backup_service import FakeStrategy


class InterruptedStrategy(FakeStrategy):
    """Recibe SIGTERM mientras consulta el servidor"""

    def check_connectivity(self):
        super().check_connectivity()
        raise KeyboardInterrupt("SIGTERM")


class TestMain(unittest.TestCase):
    """Tests para main.py"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.config_file = self.temp_dir / "config.json"
        self.log_file = self.temp_dir / "mysql-backup.log"
        self.stdout = patch("sys.stdout")
        self.stdout.start()

    def tearDown(self):
        self.stdout.stop()
        shutil.rmtree(self.temp_dir)

    def _write_config(self, **backup_settings):
        values = {
            "backup_dir": str(self.temp_dir / "backups"),
            "log_file": str(self.log_file),
        }
        values.update(backup_settings)
        self.config_file.write_text(json.dumps({"backup_settings": values}), encoding="utf-8")

    def test_default_mode_is_single_run(self):
        args = main.parse_arguments([])
        self.assertEqual(args.mode, "once")
        self.assertFalse(args.continue_on_failure)

    def test_missing_dependency_exit_code_and_log(self):
        """Test un ejecutable faltante termina con código distinto de cero"""
        missing = str(self.temp_dir / "no-such-mysql")
        self._write_config(mysql_bin=missing)

        exit_code = main.main(["--config", str(self.config_file)])

        self.assertEqual(exit_code, main.EXIT_FAILED)
        content = self.log_file.read_text(encoding="utf-8")
        self.assertIn("**** STARTING BACKUP PROCESS ****", content)
        self.assertIn(f"{missing} could not be found. Please install and re-run script. Exiting.", content)
        self.assertNotIn("BACKUP PROCESS COMPLETE", content)

    def test_invalid_configuration(self):
        self._write_config(retention_days=0)
        self.assertEqual(main.main(["--config", str(self.config_file)]), main.EXIT_USAGE)

    def test_unsupported_engine(self):
        self._write_config(engine="oracle")
        self.assertEqual(main.main(["--config", str(self.config_file)]), main.EXIT_USAGE)

    def test_stats(self):
        self._write_config()
        self.assertEqual(main.main(["--stats", "--config", str(self.config_file)]), main.EXIT_OK)

    def test_interrupt_exit_code_and_log(self):
        """Test SIGTERM durante la corrida: código 130, línea en el log y handlers cerrados"""
        bin_dir = self.temp_dir / "bin"
        bin_dir.mkdir()
        for tool in ("mysql", "mysqldump", "bzip2"):
            (bin_dir / tool).write_text("", encoding="utf-8")
        self._write_config(
            mysql_bin=str(bin_dir / "mysql"),
            mysqldump_bin=str(bin_dir / "mysqldump"),
            bzip2_bin=str(bin_dir / "bzip2"),
        )
        previous_handler = signal.getsignal(signal.SIGTERM)

        with patch("main.BackupStrategyFactory.create", return_value=InterruptedStrategy(["shop"])):
            exit_code = main.main(["--config", str(self.config_file)])

        self.assertEqual(exit_code, main.EXIT_INTERRUPTED)
        content = self.log_file.read_text(encoding="utf-8")
        self.assertIn("Backup interrupted (SIGTERM). Exiting.", content)
        self.assertNotIn("BACKUP PROCESS COMPLETE", content)
        self.assertEqual(logging.getLogger(LoggerService.ROOT_NAME).handlers, [])
        self.assertEqual(LoggerService._handlers, [])
        self.assertIs(signal.getsignal(signal.SIGTERM), previous_handler)

    def test_init_creates_files(self):
        self.assertEqual(main.main(["--init", "--config", str(self.config_file)]), main.EXIT_OK)
        self.assertTrue(self.config_file.exists())
        self.assertTrue((self.temp_dir / ".env.example").exists())


class TestRunOnce(unittest.TestCase):
    """Tests para run_once"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        bin_dir = self.temp_dir / "bin"
        bin_dir.mkdir()
        for tool in ("mysql", "mysqldump", "bzip2"):
            (bin_dir / tool).write_text("", encoding="utf-8")
        self.bin_dir = bin_dir

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def _service(self, strategy, **overrides):
        settings = BackupSettings(
            backup_dir=self.temp_dir / "backups",
            mysql_bin=str(self.bin_dir / "mysql"),
            mysqldump_bin=str(self.bin_dir / "mysqldump"),
            bzip2_bin=str(self.bin_dir / "bzip2"),
            **overrides
        )
        return BackupService(settings, strategy)

    def test_success_exit_code(self):
        self.assertEqual(main.run_once(self._service(FakeStrategy(["shop"]))), main.EXIT_OK)

    def test_dump_failure_exit_code(self):
        strategy = FakeStrategy(["first", "second", "third"], fail_on={"second"})
        self.assertEqual(main.run_once(self._service(strategy)), main.EXIT_FAILED)
        self.assertEqual(strategy.dumped, ["first", "second"])

    def test_continue_policy_still_fails_run(self):
        strategy = FakeStrategy(["first", "second", "third"], fail_on={"second"})
        service = self._service(strategy, failure_policy="continue")
        self.assertEqual(main.run_once(service), main.EXIT_FAILED)
        self.assertEqual(strategy.dumped, ["first", "second", "third"])


if __name__ == '__main__':
    unittest.main()
