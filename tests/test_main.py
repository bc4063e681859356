import json
from pathlib import Path

import pytest

from main import main


def test_main_prints_endpoint_and_trust(
    capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch, tmp_path: Path, cert_file: Path
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GIT_SSL_NO_VERIFY", raising=False)
    monkeypatch.delenv("GIT_SSL_CAINFO", raising=False)
    monkeypatch.delenv("GIT_SSL_CAPATH", raising=False)
    exit_code = main(
        [
            "ssh://git@git-server.com:2222/team/repo.git",
            "-c",
            f"http.https://git-server.com.sslcainfo={cert_file}",
            "--method",
            "POST",
        ]
    )
    assert exit_code == 0
    document = json.loads(capsys.readouterr().out)
    assert document["url"] == "https://git-server.com/team/repo.git"
    assert document["ssh"] == {
        "user_and_host": "git@git-server.com",
        "port": "2222",
        "path": "/team/repo.git",
        "scheme": "ssh",
    }
    assert document["operation"] == "upload"
    assert document["trust"] == {
        "skip_verify": False,
        "ca_certificates": 1,
        "ca_sources": [str(cert_file)],
    }


def test_main_reports_unknown_remote(
    capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.chdir(tmp_path)
    assert main([":repo.git"]) == 2
    assert json.loads(capsys.readouterr().out)["url"] == "<unknown>"


def test_main_rejects_malformed_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    assert main(["https://git-server.com/repo", "-c", "=oops"]) == 2
