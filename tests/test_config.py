from historygen.config import RuntimeSettings, load_settings


def test_defaults(monkeypatch):
    for name in ("SEED", "REMOTE", "COMMIT_HOUR", "SCRATCH_FILE", "REPO_PATH", "LOG_LEVEL"):
        monkeypatch.delenv(f"HISTORYGEN_{name}", raising=False)

    settings = RuntimeSettings(_env_file=None)

    assert settings.scratch_file == "data.json"
    assert settings.remote == "origin"
    assert settings.commit_hour == 12
    assert settings.seed is None
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("HISTORYGEN_SEED", "99")
    monkeypatch.setenv("HISTORYGEN_REMOTE", "upstream")

    settings = load_settings()

    assert settings.seed == 99
    assert settings.remote == "upstream"


def test_invalid_environment_falls_back_to_defaults(monkeypatch, capsys):
    monkeypatch.setenv("HISTORYGEN_COMMIT_HOUR", "30")

    settings = load_settings()

    assert settings.commit_hour == 12
    assert "Configuration Error" in capsys.readouterr().out


def test_log_level_is_normalised(monkeypatch):
    monkeypatch.setenv("HISTORYGEN_LOG_LEVEL", " debug ")

    assert load_settings().log_level == "DEBUG"


def test_unknown_log_level_falls_back_to_defaults(monkeypatch, capsys):
    monkeypatch.setenv("HISTORYGEN_LOG_LEVEL", "LOUD")

    assert load_settings().log_level == "INFO"
    assert "Unknown log level" in capsys.readouterr().out
