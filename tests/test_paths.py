from __future__ import annotations

from datetime import date
from pathlib import Path

from clawdis.paths import (
    CONFIG_FOLDER_ENV_VAR,
    LEGACY_LOG_PATH,
    LOG_DIR,
    default_model_catalog_path,
    default_relay_root,
    get_config_folder,
    get_default_config_path,
    get_preferences_path,
    resolve_log_path,
    rolling_log_path,
)


def test_rolling_log_path_uses_iso_date() -> None:
    path = rolling_log_path(date(2025, 3, 7))
    assert path == Path("/tmp/clawdis/clawdis-2025-03-07.log")


def test_rolling_log_path_custom_dir(tmp_path: Path) -> None:
    assert rolling_log_path(date(2024, 12, 31), tmp_path) == tmp_path / "clawdis-2024-12-31.log"


def test_resolve_log_path_prefers_existing_rolling_file() -> None:
    day = date(2025, 1, 2)
    seen: list[Path] = []

    def _exists(path) -> bool:
        seen.append(Path(path))
        return True

    assert resolve_log_path(day, exists=_exists) == LOG_DIR / "clawdis-2025-01-02.log"
    assert seen == [LOG_DIR / "clawdis-2025-01-02.log"]


def test_resolve_log_path_falls_back_to_legacy() -> None:
    assert resolve_log_path(date(2025, 1, 2), exists=lambda _p: False) == LEGACY_LOG_PATH
    assert LEGACY_LOG_PATH == Path("/tmp/clawdis.log")


def test_resolve_log_path_checks_real_filesystem(tmp_path: Path) -> None:
    day = date(2025, 6, 1)
    legacy = tmp_path / "clawdis.log"
    assert resolve_log_path(day, log_dir=tmp_path, legacy_path=legacy) == legacy

    rolling = tmp_path / "clawdis-2025-06-01.log"
    rolling.write_text("", encoding="utf-8")
    assert resolve_log_path(day, log_dir=tmp_path, legacy_path=legacy) == rolling


def test_default_locations_under_home(tmp_path: Path) -> None:
    assert default_relay_root(tmp_path) == tmp_path / "Projects" / "clawdis"
    assert default_model_catalog_path(tmp_path) == (
        tmp_path / "Projects" / "pi-mono" / "packages" / "ai" / "src" / "models.generated.ts"
    )


def test_get_config_folder_override(tmp_path: Path) -> None:
    target = tmp_path / "clawdis_home"
    assert get_config_folder(target) == target.resolve()


def test_get_config_folder_env(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv(CONFIG_FOLDER_ENV_VAR, str(tmp_path / "from-env"))
    assert get_config_folder() == (tmp_path / "from-env").resolve()


def test_preferences_and_config_paths(tmp_path: Path) -> None:
    root = tmp_path / "cfg"
    assert get_preferences_path(root) == root.resolve() / "preferences.json"
    assert get_default_config_path(root) == root.resolve() / "config.yaml"
