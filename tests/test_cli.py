"""Tests for frontdoor.cli — flag parsing and command dispatch."""

from pathlib import Path

import pytest

from frontdoor.cli import build_parser, config_from_args, main
from frontdoor.config import DEFAULT_GITWEB_FILES, DEFAULT_HTTP_ADDR, SiteConfig


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_unknown_flag(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--bogus"])
        assert exc_info.value.code == 2


class TestConfigFromArgs:
    def test_defaults(self) -> None:
        config = config_from_args(build_parser().parse_args([]))
        assert config.http_addr == DEFAULT_HTTP_ADDR
        assert config.https_addr == ""
        assert config.gitweb_script == "/usr/lib/cgi-bin/gitweb.cgi"
        assert config.gitweb_files == DEFAULT_GITWEB_FILES
        assert config.log_stdout is True
        assert config.gerrit_user == "ubuntu"
        assert config.gerrit_host == ""

    def test_all_flags(self) -> None:
        args = build_parser().parse_args(
            [
                "--http=127.0.0.1:8080",
                "--https=:8443",
                "--tlscert=/etc/tls/cert.pem",
                "--tlskey=/etc/tls/key.pem",
                "--root=/srv/site",
                "--gitwebscript=",
                "--gitwebfiles=/srv/gitweb",
                "--logdir=/var/log/frontdoor",
                "--no-logstdout",
                "--gerrituser=git",
                "--gerrithost=review.internal",
                "--buildbot-backend=http://localhost:8010",
                "--buildbot-host=build.camlistore.org",
                "--docs-backend=http://localhost:6060",
            ]
        )
        config = config_from_args(args)
        assert config == SiteConfig(
            http_addr="127.0.0.1:8080",
            https_addr=":8443",
            tls_cert_file="/etc/tls/cert.pem",
            tls_key_file="/etc/tls/key.pem",
            root="/srv/site",
            gitweb_script="",
            gitweb_files="/srv/gitweb",
            log_dir="/var/log/frontdoor",
            log_stdout=False,
            gerrit_user="git",
            gerrit_host="review.internal",
            buildbot_backend="http://localhost:8010",
            buildbot_host="build.camlistore.org",
            docs_backend="http://localhost:6060",
        )


class TestMain:
    def test_runs_site(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: list[SiteConfig] = []
        monkeypatch.setattr("frontdoor.cli._run.run_site", seen.append)
        main(["--root=/srv/site", "--gerrithost=review.internal"])
        assert len(seen) == 1
        assert seen[0].root == "/srv/site"
        assert seen[0].gerrit_host == "review.internal"

    def test_routes(self, site_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main([f"--root={site_root}", "--gitwebscript=", "--no-logstdout", "--routes"])
        out = capsys.readouterr().out
        lines = out.splitlines()
        assert lines[0].split() == ["PATTERN", "HOST", "ADAPTER"]
        assert any(line.startswith("/issue/") and "IssueRedirect" in line for line in lines)
        assert "/code/" not in out.split()

    def test_routes_with_bad_root(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([f"--root={tmp_path}", "--no-logstdout", "--routes"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_run_with_bad_root(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([f"--root={tmp_path}", "--no-logstdout"])
        assert exc_info.value.code == 1
