"""Tests for the environment drift detection script."""

from __future__ import annotations

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from pathlib import Path

import pytest

from scripts import check_env

REQUIRED_ENV_KEYS = [
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "GOOGLE_REDIRECT_URI",
]

VALID_ENV = {
    "GOOGLE_CLIENT_ID": "abc.apps.googleusercontent.com",
    "GOOGLE_CLIENT_SECRET": "secret",
    "GOOGLE_REDIRECT_URI": "https://bridge.example.com/api/oauth/callback",
    "ZAPIER_WEBHOOK_URL": "https://hooks.zapier.com/hooks/catch/123/abc/",
}


def _write_env(env_path: Path, **values: str) -> None:
    contents = "\n".join(f"{key}={value}" for key, value in values.items())
    env_path.write_text(contents + "\n", encoding="utf-8")


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in [*REQUIRED_ENV_KEYS, "ZAPIER_WEBHOOK_URL"]:
        monkeypatch.setenv(key, "placeholder")
        monkeypatch.delenv(key)
    return monkeypatch


@pytest.mark.parametrize("command", ["record", "verify", "check"])
def test_main_requires_existing_env_file(tmp_path: Path, command: str) -> None:
    env_file = tmp_path / ".missing-env"
    argv = [command, "--env-file", str(env_file)]
    if command != "check":
        argv.extend(["--hash-file", str(tmp_path / ".env.sha256")])

    assert check_env.main(argv) == check_env.EXIT_RUNTIME_ERROR


def test_check_accepts_complete_env(tmp_path: Path, clean_env, capsys) -> None:
    env_file = tmp_path / ".env"
    _write_env(env_file, **VALID_ENV)

    assert check_env.main(["check", "--env-file", str(env_file)]) == check_env.EXIT_OK
    assert "webhook=enabled" in capsys.readouterr().out


def test_record_and_verify_detects_mismatched_checksum(tmp_path: Path, clean_env) -> None:
    env_file = tmp_path / ".env"
    hash_file = tmp_path / ".env.sha256"
    _write_env(env_file, **VALID_ENV)

    argv = ["--env-file", str(env_file), "--hash-file", str(hash_file)]
    assert check_env.main(["record", *argv]) == check_env.EXIT_OK
    assert hash_file.read_text(encoding="utf-8").strip()
    assert check_env.main(["verify", *argv]) == check_env.EXIT_OK

    _write_env(env_file, **{**VALID_ENV, "GOOGLE_CLIENT_SECRET": "rotated"})

    assert check_env.main(["verify", *argv]) == check_env.EXIT_CHECKSUM_ERROR


def test_verify_without_baseline_fails(tmp_path: Path, clean_env) -> None:
    env_file = tmp_path / ".env"
    _write_env(env_file, **VALID_ENV)

    exit_code = check_env.main(
        ["verify", "--env-file", str(env_file), "--hash-file", str(tmp_path / "none")]
    )

    assert exit_code == check_env.EXIT_RUNTIME_ERROR


def test_validation_failure_for_missing_required_values(tmp_path: Path, clean_env) -> None:
    env_file = tmp_path / ".env"
    values = {key: value for key, value in VALID_ENV.items() if key != "GOOGLE_CLIENT_SECRET"}
    _write_env(env_file, **values)

    exit_code = check_env.main(["check", "--env-file", str(env_file)])

    assert exit_code == check_env.EXIT_VALIDATION_ERROR
