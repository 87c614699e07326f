import unittest
from unittest.mock import patch
import io
import json
import sys
import os
import shutil
import tempfile
from pathlib import Path

import yaml

# Add the src directory to the path to import dsc_provisioner modules
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from dsc_provisioner import cli
from dsc_provisioner.counter import reset_counters


class TestCli(unittest.TestCase):
    def setUp(self):
        reset_counters()
        self.temp_dir = tempfile.mkdtemp()
        self.root = Path(self.temp_dir)
        (self.root / "site.ps1").write_text("Configuration Site {}\n", encoding="utf-8")

        settings = {
            "LOG_LEVEL": "INFO",
            "DEFINITION_FILE": str(self.root / "machines.yaml"),
            "PROVISIONER_DEFAULTS": {},
        }
        self.patchers = [
            patch("dsc_provisioner.cli.load_config", return_value=settings),
            patch("dsc_provisioner.cli.get_provisioner_defaults", return_value={}),
            patch("dsc_provisioner.cli.get_log_path", return_value=self.root / "dsc.log"),
            patch("dsc_provisioner.cli.setup_logging"),
        ]
        for patcher in self.patchers:
            patcher.start()

    def tearDown(self):
        for patcher in self.patchers:
            patcher.stop()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write(self, provisioners):
        path = self.root / "machines.yaml"
        document = {"machines": [{"name": "web", "provision": provisioners}]}
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(document, f)
        return str(path)

    def _run(self, argv):
        with patch("sys.stdout", new_callable=io.StringIO) as stdout, \
                patch("sys.stderr", new_callable=io.StringIO) as stderr:
            code = cli.main(argv)
        return code, stdout.getvalue(), stderr.getvalue()

    def test_check_valid(self):
        path = self._write([{"type": "dsc", "configuration_file": "site.ps1"}])
        code, out, _ = self._run(["check", path])
        self.assertEqual(code, cli.EXIT_OK)
        self.assertIn("web/0: ok", out)

    def test_check_uses_configured_definition(self):
        self._write([{"type": "dsc", "configuration_file": "site.ps1"}])
        code, out, _ = self._run(["check"])
        self.assertEqual(code, cli.EXIT_OK)
        self.assertIn("web/0: ok", out)

    def test_check_reports_errors(self):
        path = self._write([{"type": "dsc", "configuration_file": "missing.ps1"}])
        code, out, _ = self._run(["check", path])
        self.assertEqual(code, cli.EXIT_INVALID)
        self.assertIn("web/0: 1 error(s)", out)
        self.assertIn("missing.ps1", out)

    def test_check_without_dsc_provisioners(self):
        path = self._write([{"type": "shell"}])
        code, out, _ = self._run(["check", path])
        self.assertEqual(code, cli.EXIT_OK)
        self.assertIn("No dsc provisioners found.", out)

    def test_config_error(self):
        path = self._write([{"type": "dsc", "mof_path": "mof"}])
        code, _, err = self._run(["check", path])
        self.assertEqual(code, cli.EXIT_CONFIG_ERROR)
        self.assertIn("mof_path", err)

    def test_missing_definition(self):
        code, _, err = self._run(["check", str(self.root / "absent.yaml")])
        self.assertEqual(code, cli.EXIT_CONFIG_ERROR)
        self.assertIn("Invalid machine definition", err)

    def test_wrongly_typed_option_is_a_config_error(self):
        for provisioner in (
            {"type": "dsc", "configuration_params": ["a", "b"]},
            {"type": "dsc", "configuration_file": 42},
            {"type": "dsc", 1: "x"},
        ):
            with self.subTest(provisioner=provisioner):
                path = self._write([provisioner])
                code, _, err = self._run(["check", path])
                self.assertEqual(code, cli.EXIT_CONFIG_ERROR)
                self.assertIn("DSC provisioner option", err)

    def test_settings_loaded_once(self):
        path = self._write([{"type": "dsc", "configuration_file": "site.ps1"}])
        self._run(["check", path])
        cli.load_config.assert_called_once_with()

    def test_init_config(self):
        config_path = self.root / "settings" / "config.yaml"
        with patch("dsc_provisioner.config.get_config_paths", return_value=[config_path]):
            code, out, _ = self._run(["init-config"])
            self.assertEqual(code, cli.EXIT_OK)
            self.assertIn(str(config_path), out)
            with open(config_path, encoding="utf-8") as f:
                written = yaml.safe_load(f)
            self.assertEqual(written["LOG_LEVEL"], "INFO")

            code, out, _ = self._run(["init-config"])
            self.assertEqual(code, cli.EXIT_INVALID)
            self.assertIn("already exists", out)

            code, _, _ = self._run(["init-config", "--force"])
            self.assertEqual(code, cli.EXIT_OK)

    def test_show(self):
        path = self._write([{"type": "dsc", "configuration_file": "site.ps1", "temp_dir": "/tmp/dsc"}])
        code, out, _ = self._run(["show", path])
        self.assertEqual(code, cli.EXIT_OK)
        data = json.loads(out)
        self.assertEqual(data["web/0"]["expanded_configuration_file"], "/tmp/dsc/site.ps1")
        self.assertEqual(data["web/0"]["configuration_name"], "site")

    @patch("dsc_provisioner.cli.setup_logging")
    def test_verbose_enables_debug(self, mock_setup_logging):
        path = self._write([{"type": "dsc", "configuration_file": "site.ps1"}])
        self._run(["-v", "check", path])
        mock_setup_logging.assert_called_once_with("DEBUG", self.root / "dsc.log")


if __name__ == "__main__":
    unittest.main()
