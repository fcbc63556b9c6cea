from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import PathNotFound
from core.locator import (
    SETTINGS_FILE_NAME,
    SettingsLocator,
    default_candidates,
    expand_path,
    split_search_paths,
)


def _make_settings_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    (path / SETTINGS_FILE_NAME).write_bytes(b"x")
    return path


def test_first_existing_candidate_wins(tmp_path: Path) -> None:
    missing = tmp_path / "missing"
    first = _make_settings_dir(tmp_path / "first")
    second = _make_settings_dir(tmp_path / "second")

    locator = SettingsLocator(candidates=[str(missing), str(first), str(second)])
    assert locator.resolve() == first / SETTINGS_FILE_NAME


def test_no_candidate_raises_path_not_found(tmp_path: Path) -> None:
    locator = SettingsLocator(candidates=[str(tmp_path / "a"), str(tmp_path / "b")])
    with pytest.raises(PathNotFound) as exc_info:
        locator.resolve()
    assert exc_info.value.step == "locate"


def test_directory_named_like_file_is_ignored(tmp_path: Path) -> None:
    (tmp_path / "odd" / SETTINGS_FILE_NAME).mkdir(parents=True)
    with pytest.raises(PathNotFound):
        SettingsLocator(candidates=[str(tmp_path / "odd")]).resolve()


def test_result_is_cached_across_environment_changes(tmp_path: Path, monkeypatch) -> None:
    first = _make_settings_dir(tmp_path / "first")
    second = _make_settings_dir(tmp_path / "second")
    monkeypatch.setenv("SSMS_SETTINGS_DIR", str(first))

    locator = SettingsLocator(candidates=["%SSMS_SETTINGS_DIR%"])
    assert locator.resolve() == first / SETTINGS_FILE_NAME

    monkeypatch.setenv("SSMS_SETTINGS_DIR", str(second))
    assert locator.resolve() == first / SETTINGS_FILE_NAME


def test_vanished_cached_file_is_probed_again(tmp_path: Path) -> None:
    first = _make_settings_dir(tmp_path / "first")
    second = _make_settings_dir(tmp_path / "second")
    locator = SettingsLocator(candidates=[str(first), str(second)])
    assert locator.resolve() == first / SETTINGS_FILE_NAME

    (first / SETTINGS_FILE_NAME).unlink()
    assert locator.resolve() == second / SETTINGS_FILE_NAME


def test_extra_paths_are_appended_after_defaults(tmp_path: Path) -> None:
    configured = _make_settings_dir(tmp_path / "configured")
    locator = SettingsLocator(
        candidates=[str(tmp_path / "default")],
        extra_paths=f" ; {configured} ;;",
    )
    assert locator.candidates == [str(tmp_path / "default"), str(configured)]
    assert locator.resolve() == configured / SETTINGS_FILE_NAME


def test_split_search_paths() -> None:
    assert split_search_paths(None) == []
    assert split_search_paths("") == []
    assert split_search_paths(r"C:\a; D:\b ;") == [r"C:\a", r"D:\b"]


def test_expand_path_handles_windows_and_posix_variables(monkeypatch) -> None:
    monkeypatch.setenv("SSMSMRU_ROOT", "/data/root")
    assert expand_path("%SSMSMRU_ROOT%/Shell") == "/data/root/Shell"
    assert expand_path("$SSMSMRU_ROOT/Shell") == "/data/root/Shell"
    assert expand_path("%SSMSMRU_UNSET_VAR%/x") == "%SSMSMRU_UNSET_VAR%/x"


def test_default_candidates_start_with_sql_2008_shell_folder(monkeypatch) -> None:
    monkeypatch.setenv("APPDATA", "/appdata")
    candidates = default_candidates()

    assert Path(candidates[0]).parts[-5:] == ("Microsoft", "Microsoft SQL Server", "100", "Tools", "Shell")
    assert all(c.startswith("/appdata") for c in candidates)
    assert any(Path(c).name == "18.0" for c in candidates)


def test_probe_reports_every_candidate(tmp_path: Path) -> None:
    present = _make_settings_dir(tmp_path / "present")
    locator = SettingsLocator(candidates=[str(tmp_path / "absent"), str(present)])

    assert locator.probe() == [
        (tmp_path / "absent" / SETTINGS_FILE_NAME, False),
        (present / SETTINGS_FILE_NAME, True),
    ]


def test_default_candidates_cover_current_studio_folders(monkeypatch) -> None:
    monkeypatch.setenv("APPDATA", "/appdata")
    versions = [Path(c).name for c in default_candidates()[1:]]

    assert versions == ["11.0", "12.0", "13.0", "14.0", "18.0", "19.0", "20.0"]


def test_path_not_found_points_at_config_setting(tmp_path: Path) -> None:
    with pytest.raises(PathNotFound, match="paths_to_search"):
        SettingsLocator(candidates=[str(tmp_path / "nowhere")]).resolve()
