"""Bootstrap tests for ``run_app`` with the terminal and store mocked."""

from __future__ import annotations

import unittest
from unittest import mock

from redisnav.config import AppConfig, ConnectionConfig
from redisnav.pipeline import ScanKeys
from redisnav.runtime import app as app_module
from redisnav.store import StoreConnectionError


def _config() -> AppConfig:
    return AppConfig(connection=ConnectionConfig(url="redis://:secret@h:1", readonly=True))


class RunAppTests(unittest.TestCase):
    def test_requires_a_terminal(self) -> None:
        with mock.patch("redisnav.runtime.app.os.isatty", return_value=False), mock.patch(
            "redisnav.runtime.app.sys"
        ) as fake_sys:
            fake_sys.stdin.fileno.return_value = 0
            fake_sys.stdout.fileno.return_value = 1
            with self.assertRaises(SystemExit):
                app_module.run_app(_config())

    def test_connection_failure_exits_without_password(self) -> None:
        with mock.patch("redisnav.runtime.app.os.isatty", return_value=True), mock.patch(
            "redisnav.runtime.app.sys"
        ) as fake_sys, mock.patch(
            "redisnav.runtime.app.RedisStoreAdapter.connect",
            side_effect=StoreConnectionError("refused"),
        ):
            fake_sys.stdin.fileno.return_value = 0
            fake_sys.stdout.fileno.return_value = 1
            with self.assertRaises(SystemExit) as ctx:
                app_module.run_app(_config())
        message = str(ctx.exception)
        self.assertIn("refused", message)
        self.assertNotIn("secret", message)

    def test_wires_pipeline_and_cleans_up(self) -> None:
        adapter = mock.Mock()
        pipeline = mock.Mock()
        with mock.patch("redisnav.runtime.app.os.isatty", return_value=True), mock.patch(
            "redisnav.runtime.app.sys"
        ) as fake_sys, mock.patch(
            "redisnav.runtime.app.RedisStoreAdapter.connect", return_value=adapter
        ), mock.patch(
            "redisnav.runtime.app.StorePipeline", return_value=pipeline
        ), mock.patch(
            "redisnav.runtime.app.TerminalController"
        ), mock.patch(
            "redisnav.runtime.app.run_main_loop", side_effect=RuntimeError("loop crashed")
        ) as run_main_loop:
            fake_sys.stdin.fileno.return_value = 0
            fake_sys.stdout.fileno.return_value = 1
            with self.assertRaises(RuntimeError):
                app_module.run_app(_config(), no_color=True)

        pipeline.start.assert_called_once_with()
        pipeline.submit.assert_called_once_with(ScanKeys())
        view_model, context = run_main_loop.call_args.args[:2]
        self.assertTrue(view_model.readonly)
        self.assertEqual(context.url, "redis://:***@h:1")
        self.assertEqual(context.theme.name, "plain")
        pipeline.stop.assert_called_once_with()
        adapter.close.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
