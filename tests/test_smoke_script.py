import shutil
from pathlib import Path

import certifi
import pytest

from scripts.smoke_test import REMOTES, build_config, run_smoke_flow


@pytest.mark.anyio
async def test_smoke_flow_resolves_every_remote(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    ca_file = tmp_path / "ca-bundle.pem"
    shutil.copyfile(certifi.where(), ca_file)

    assert await run_smoke_flow(build_config(ca_file)) is True

    out = capsys.readouterr().out
    for remote, expected in REMOTES:
        assert remote in out
        assert f"url={expected}" in out
    assert "no HTTP client" in out
