"""CLI argument parsing and dispatch tests.

``run_app`` and ``configure_logging`` are patched so nothing touches a
terminal, a server, or the user's log directory.
"""

from __future__ import annotations

import tempfile
import unittest
from contextlib import redirect_stderr
from io import StringIO
from pathlib import Path
from unittest import mock

from redisnav import cli


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.config_path = Path(self._tmp.name) / "config.toml"
        patcher = mock.patch("redisnav.cli.configure_logging", return_value=Path(self._tmp.name) / "log")
        self.configure_logging = patcher.start()
        self.addCleanup(patcher.stop)
        env_patcher = mock.patch.dict("os.environ", {}, clear=True)
        env_patcher.start()
        self.addCleanup(env_patcher.stop)

    def _main(self, *argv: str) -> mock.Mock:
        with mock.patch("redisnav.cli.run_app") as run_app:
            cli.main(["--config", str(self.config_path), *argv])
        return run_app

    def test_defaults(self) -> None:
        run_app = self._main()
        run_app.assert_called_once()
        config = run_app.call_args.args[0]
        self.assertEqual(config.connection.url, "redis://127.0.0.1:6379")
        self.assertEqual(config.ui.delimiters, (":",))
        self.assertEqual(run_app.call_args.kwargs, {"style": "monokai", "no_color": False})
        self.assertEqual(self.configure_logging.call_args.args[1], 30)

    def test_flags(self) -> None:
        run_app = self._main("-H", "db.local", "-p", "6390", "-n", "2", "-d", ":", "-d", "/", "--readonly", "--no-color", "-v")
        config = run_app.call_args.args[0]
        self.assertEqual(config.connection.url, "redis://db.local:6390/2")
        self.assertTrue(config.connection.readonly)
        self.assertEqual(config.ui.delimiters, (":", "/"))
        self.assertTrue(run_app.call_args.kwargs["no_color"])
        self.assertEqual(self.configure_logging.call_args.args[1], 10)

    def test_profile_from_config_file(self) -> None:
        self.config_path.write_text('[profiles.local]\nurl = "redis://10.0.0.5:6379"\n', encoding="utf-8")
        run_app = self._main("local")
        self.assertEqual(run_app.call_args.args[0].connection.url, "redis://10.0.0.5:6379")

    def test_unknown_profile_exits(self) -> None:
        self.config_path.write_text('[profiles.local]\nurl = "redis://10.0.0.5:6379"\n', encoding="utf-8")
        with mock.patch("redisnav.cli.run_app") as run_app:
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["--config", str(self.config_path), "--profile", "missing"])
        run_app.assert_not_called()
        self.assertIn("missing", str(ctx.exception))

    def test_multi_character_delimiter_is_rejected(self) -> None:
        with redirect_stderr(StringIO()), self.assertRaises(SystemExit):
            self._main("-d", "::")

    def test_invalid_port_is_rejected(self) -> None:
        with redirect_stderr(StringIO()), self.assertRaises(SystemExit):
            self._main("-p", "70000")


if __name__ == "__main__":
    unittest.main()
