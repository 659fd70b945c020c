import json
from pathlib import Path
import sys

import pytest


FAKE_JJ = """\
import json
import os
import sys

args = sys.argv[1:]
with open(os.environ["FAKE_JJ_LOG"], "a", encoding="utf-8") as f:
    f.write(json.dumps(args) + "\\n")
if args[:2] == ["git", "clone"]:
    long_line = int(os.environ.get("FAKE_JJ_CLONE_LONG_LINE", "0"))
    if long_line:
        sys.stderr.write("x" * long_line + "\\n")
    for i in range(int(os.environ.get("FAKE_JJ_CLONE_NOISE", "0"))):
        sys.stderr.write(f"progress line {i}\\n")
    sys.stderr.write(os.environ.get("FAKE_JJ_CLONE_STDERR", ""))
    sys.stderr.flush()
    sys.exit(int(os.environ.get("FAKE_JJ_CLONE_EXIT", "0")))
sys.exit(int(os.environ.get("FAKE_JJ_REMOTE_EXIT", "0")))
"""


class FakeJJ:
    def __init__(self, script: Path, log: Path, monkeypatch: pytest.MonkeyPatch):
        self.tool = [sys.executable, str(script)]
        self.log = log
        self._monkeypatch = monkeypatch

    def set_clone_stderr(self, text: str) -> None:
        self._monkeypatch.setenv("FAKE_JJ_CLONE_STDERR", text)

    def set_clone_long_line(self, length: int) -> None:
        self._monkeypatch.setenv("FAKE_JJ_CLONE_LONG_LINE", str(length))

    def set_clone_noise(self, lines: int) -> None:
        self._monkeypatch.setenv("FAKE_JJ_CLONE_NOISE", str(lines))

    def set_clone_exit(self, code: int) -> None:
        self._monkeypatch.setenv("FAKE_JJ_CLONE_EXIT", str(code))

    def set_remote_exit(self, code: int) -> None:
        self._monkeypatch.setenv("FAKE_JJ_REMOTE_EXIT", str(code))

    def calls(self) -> list[list[str]]:
        if not self.log.exists():
            return []
        return [json.loads(line) for line in self.log.read_text().splitlines()]


@pytest.fixture(autouse=True)
def isolated_gh_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep tests away from the developer's real gh configuration and tokens."""
    for var in (
        "GH_TOKEN",
        "GITHUB_TOKEN",
        "GH_ENTERPRISE_TOKEN",
        "GITHUB_ENTERPRISE_TOKEN",
        "GH_HOST",
        "GH_JJ_BIN",
    ):
        monkeypatch.delenv(var, raising=False)
    config = tmp_path / "gh-config"
    config.mkdir()
    monkeypatch.setenv("GH_CONFIG_DIR", str(config))
    monkeypatch.setattr("gh_jj.hosts.keyring_token", lambda hostname: None)
    return config


@pytest.fixture
def fake_jj(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> FakeJJ:
    script = tmp_path / "fake_jj.py"
    script.write_text(FAKE_JJ, encoding="utf-8")
    log = tmp_path / "fake_jj.log"
    monkeypatch.setenv("FAKE_JJ_LOG", str(log))
    return FakeJJ(script, log, monkeypatch)
