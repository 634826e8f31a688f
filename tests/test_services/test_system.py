import subprocess
from pathlib import Path
from types import SimpleNamespace

import pytest

from clawdis.services.system import BUNDLE_PATH_ENV_VAR, SystemServices


class _Recorder:
    def __init__(self, error: Exception | None = None, returncode: int = 0) -> None:
        self.calls: list[tuple[list[str], dict]] = []
        self.error = error
        self.returncode = returncode

    def __call__(self, argv, **kwargs):
        self.calls.append((list(argv), kwargs))
        if self.error is not None:
            raise self.error
        return SimpleNamespace(returncode=self.returncode)


def _services(platform: str = "darwin", **kwargs) -> SystemServices:
    kwargs.setdefault("environ", {})
    kwargs.setdefault("executable", "/usr/local/bin/python3")
    return SystemServices(platform=platform, **kwargs)


def test_bundle_path_env_override() -> None:
    services = _services(environ={BUNDLE_PATH_ENV_VAR: "/Applications/Clawdis.app"})
    assert services.bundle_path() == Path("/Applications/Clawdis.app")


def test_bundle_path_enclosing_app() -> None:
    services = _services(executable="/Applications/Clawdis.app/Contents/MacOS/python3")
    assert services.bundle_path() == Path("/Applications/Clawdis.app")


def test_bundle_path_falls_back_to_package_dir() -> None:
    assert _services().bundle_path().name == "clawdis"


def test_open_path_uses_platform_opener() -> None:
    popen = _Recorder()
    assert _services("darwin", popen=popen).open_path("/tmp/clawdis.log") is True
    assert _services("linux", popen=popen).open_path("/tmp/clawdis.log") is True

    assert popen.calls[0][0] == ["/usr/bin/open", "/tmp/clawdis.log"]
    assert popen.calls[1][0] == ["xdg-open", "/tmp/clawdis.log"]
    assert popen.calls[0][1]["start_new_session"] is True


def test_open_path_failure_returns_false() -> None:
    popen = _Recorder(error=FileNotFoundError("xdg-open"))
    assert _services("linux", popen=popen).open_path("/tmp/x") is False


def test_reveal_in_file_browser() -> None:
    popen = _Recorder()
    _services("darwin", popen=popen).reveal_in_file_browser("/Applications/Clawdis.app")
    _services("linux", popen=popen).reveal_in_file_browser("/opt/clawdis/bin/clawdis")

    assert popen.calls[0][0] == ["/usr/bin/open", "-R", "/Applications/Clawdis.app"]
    assert popen.calls[1][0] == ["xdg-open", "/opt/clawdis/bin"]


def test_spawn_and_wait_returns_status() -> None:
    run = _Recorder(returncode=2)
    assert _services(run=run).spawn_and_wait(["/usr/bin/open", "/Applications/Clawdis.app"]) == 2
    assert run.calls[0][1]["check"] is False


@pytest.mark.parametrize("error", [OSError("denied"), subprocess.SubprocessError("boom")])
def test_spawn_and_wait_failure_returns_none(error: Exception) -> None:
    assert _services(run=_Recorder(error=error)).spawn_and_wait(["x"]) is None


def test_relaunch_command_only_for_macos_bundles() -> None:
    assert _services("darwin").relaunch_command("/Applications/Clawdis.app") == [
        "/usr/bin/open",
        "/Applications/Clawdis.app",
    ]
    assert _services("darwin").relaunch_command("/opt/clawdis") is None
    assert _services("linux").relaunch_command("/Applications/Clawdis.app") is None


def test_reexec_argv() -> None:
    assert _services().reexec_argv(["--log-level", "DEBUG"]) == [
        "/usr/local/bin/python3",
        "-m",
        "clawdis",
        "--log-level",
        "DEBUG",
    ]
