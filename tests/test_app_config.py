import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from utils import app_config


class TestAppConfig(unittest.TestCase):
    def setUp(self):
        """Point the config file at a temporary directory"""
        self._tmp = tempfile.TemporaryDirectory()
        config_dir = Path(self._tmp.name) / "cfg"
        patchers = [
            patch.object(app_config, "CONFIG_DIR", config_dir),
            patch.object(app_config, "CONFIG_FILE", config_dir / "config.json"),
        ]
        for p in patchers:
            p.start()
            self.addCleanup(p.stop)
        self.addCleanup(self._tmp.cleanup)

    def test_missing_file_is_empty(self):
        self.assertEqual(app_config.load_config(), {})
        self.assertIsNone(app_config.get_db_folder())
        self.assertEqual(app_config.get_last_email(), "")

    def test_round_trip_and_unset(self):
        app_config.set_db_folder("/data/finance")
        app_config.set_last_email("ana@example.com")
        self.assertEqual(app_config.get_db_folder(), "/data/finance")
        self.assertEqual(app_config.get_last_email(), "ana@example.com")
        app_config.set_db_folder(None)
        self.assertIsNone(app_config.get_db_folder())
        self.assertEqual(app_config.get_last_email(), "ana@example.com")

    def test_corrupt_file_is_ignored(self):
        app_config.CONFIG_DIR.mkdir(parents=True)
        app_config.CONFIG_FILE.write_text("{not json", encoding="utf-8")
        self.assertEqual(app_config.load_config(), {})


if __name__ == "__main__":
    unittest.main()
