"""Tests for main.py."""

import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from errors import NetworkError
from main import EXIT_FAILURE, EXIT_NO_CREDENTIALS, EXIT_SUCCESS, main, parse_args
from uploader import UploadResult


def make_config(tmp_path, has_credentials=True):
    site_dir = tmp_path / "site"
    site_dir.mkdir(exist_ok=True)
    config = MagicMock(site_dir=site_dir, batch_size=20, has_credentials=has_credentials)
    client = MagicMock()
    config.make_client.return_value = client
    return config, client


class TestParseArgs:
    """Tests for parse_args()."""

    def test_default_values(self):
        """Uses default values when only a command is given."""
        with patch.object(sys, "argv", ["main.py", "push"]):
            args = parse_args()

        assert args.command == "push"
        assert args.args == []
        assert args.config is None
        assert args.site_dir is None
        assert args.api_key is None
        assert args.prune is False
        assert args.dry_run is False

    def test_all_args_provided(self):
        with patch.object(
            sys,
            "argv",
            [
                "main.py", "push",
                "-c", "/path/to/neocities.toml",
                "-d", "/path/to/site",
                "-k", "abc",
                "-b", "10",
                "--prune",
                "-n",
            ],
        ):
            args = parse_args()

        assert args.config == Path("/path/to/neocities.toml")
        assert args.site_dir == "/path/to/site"
        assert args.api_key == "abc"
        assert args.batch_size == 10
        assert args.prune is True
        assert args.dry_run is True

    def test_command_arguments(self):
        with patch.object(sys, "argv", ["main.py", "upload", "site/index.html", "index.html"]):
            args = parse_args()

        assert args.args == ["site/index.html", "index.html"]

    def test_wrong_argument_count_exits(self):
        with patch.object(sys, "argv", ["main.py", "upload", "only-one"]):
            with pytest.raises(SystemExit):
                parse_args()

    def test_unknown_command_exits(self):
        with patch.object(sys, "argv", ["main.py", "frobnicate"]):
            with pytest.raises(SystemExit):
                parse_args()

    def test_verbose_and_quiet_are_exclusive(self):
        with patch.object(sys, "argv", ["main.py", "push", "-v", "-q"]):
            with pytest.raises(SystemExit):
                parse_args()

    def test_log_file_arg(self):
        with patch.object(sys, "argv", ["main.py", "key", "--log-file", "/tmp/test.log"]):
            args = parse_args()

        assert args.log_file == Path("/tmp/test.log")


class TestMain:
    """Tests for main()."""

    def test_push_returns_zero_on_success(self, tmp_path):
        config, client = make_config(tmp_path)
        with patch.object(sys, "argv", ["main.py", "push"]), \
             patch("main.Config.load", return_value=config), \
             patch("main.SiteCatalog.load") as mock_catalog, \
             patch("main.publish_site") as mock_publish:

            mock_catalog.return_value.__len__.return_value = 3
            mock_publish.return_value = UploadResult(
                total_files=3,
                skipped_files=1,
                uploaded_files=2,
            )

            exit_code = main()

        assert exit_code == EXIT_SUCCESS
        mock_catalog.assert_called_once_with(client)
        assert mock_publish.call_args.args[0] is client
        client.close.assert_called_once()

    def test_missing_credentials(self, tmp_path, caplog):
        config, client = make_config(tmp_path, has_credentials=False)
        with patch.object(sys, "argv", ["main.py", "list"]), \
             patch("main.Config.load", return_value=config):

            with caplog.at_level(logging.ERROR):
                exit_code = main()

        assert exit_code == EXIT_NO_CREDENTIALS
        assert "No credentials" in caplog.text
        config.make_client.assert_not_called()

    def test_info_for_other_site_needs_no_credentials(self, tmp_path, capsys):
        config, client = make_config(tmp_path, has_credentials=False)
        client.info_no_auth.return_value = '{"result": "success"}'
        with patch.object(sys, "argv", ["main.py", "info", "ambyshframber"]), \
             patch("main.Config.load", return_value=config):

            exit_code = main()

        assert exit_code == EXIT_SUCCESS
        client.info_no_auth.assert_called_once_with("ambyshframber")
        assert '{"result": "success"}' in capsys.readouterr().out

    def test_returns_one_on_api_error(self, tmp_path, caplog):
        config, client = make_config(tmp_path)
        client.list_all.side_effect = NetworkError("GET list failed")
        with patch.object(sys, "argv", ["main.py", "list"]), \
             patch("main.Config.load", return_value=config):

            with caplog.at_level(logging.ERROR):
                exit_code = main()

        assert exit_code == EXIT_FAILURE
        assert "GET list failed" in caplog.text
        client.close.assert_called_once()

    def test_push_missing_site_dir(self, tmp_path):
        config, client = make_config(tmp_path)
        config.site_dir = tmp_path / "does-not-exist"
        with patch.object(sys, "argv", ["main.py", "push"]), \
             patch("main.Config.load", return_value=config):

            exit_code = main()

        assert exit_code == EXIT_FAILURE

    def test_upload_skips_unchanged_file(self, tmp_path):
        config, client = make_config(tmp_path)
        with patch.object(sys, "argv", ["main.py", "upload", "site/index.html", "index.html"]), \
             patch("main.Config.load", return_value=config), \
             patch("main.SiteCatalog.load") as mock_catalog:

            mock_catalog.return_value.file_changed_local.return_value = False
            exit_code = main()

        assert exit_code == EXIT_SUCCESS
        mock_catalog.return_value.file_changed_local.assert_called_once_with(
            "site/index.html", "/index.html"
        )
        client.upload.assert_not_called()

    def test_upload_force_skips_comparison(self, tmp_path):
        config, client = make_config(tmp_path)
        with patch.object(sys, "argv", ["main.py", "upload", "site/index.html", "/index.html", "-f"]), \
             patch("main.Config.load", return_value=config), \
             patch("main.SiteCatalog.load") as mock_catalog:

            exit_code = main()

        assert exit_code == EXIT_SUCCESS
        mock_catalog.assert_not_called()
        client.upload.assert_called_once_with("site/index.html", "index.html")

    def test_delete_strips_leading_slash(self, tmp_path):
        config, client = make_config(tmp_path)
        with patch.object(sys, "argv", ["main.py", "delete", "/old.html", "img/a.png"]), \
             patch("main.Config.load", return_value=config):

            exit_code = main()

        assert exit_code == EXIT_SUCCESS
        client.delete_multiple.assert_called_once_with(["old.html", "img/a.png"])

    def test_status_prints_changes(self, tmp_path, capsys, fake_gateway_factory, sample_listing):
        config, client = make_config(tmp_path)
        (config.site_dir / "index.html").write_bytes(b"")
        (config.site_dir / "about.html").write_bytes(b"<p>about</p>")
        gateway = fake_gateway_factory(sample_listing)
        client.list_all.side_effect = gateway.list_all
        with patch.object(sys, "argv", ["main.py", "status"]), \
             patch("main.Config.load", return_value=config):

            exit_code = main()

        out = capsys.readouterr().out
        assert exit_code == EXIT_SUCCESS
        assert "A /about.html" in out
        assert "R /images/cat.png" in out
        assert "M /index.html" not in out
        assert "A /index.html" not in out
