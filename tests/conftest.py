import pytest
import git

from historygen.schemas import GenerationSettings


@pytest.fixture
def temp_git_repo(tmp_path):
    """
    Creates a temporary git repo with one commit.
    returns the path to the repo.
    """
    repo_dir = tmp_path / "test_repo"
    repo_dir.mkdir()

    repo = git.Repo.init(repo_dir)

    # Configure author (required for commits)
    repo.config_writer().set_value("user", "name", "Test Bot").release()
    repo.config_writer().set_value("user", "email", "test@bot.com").release()

    # Create a file and commit it (History)
    file_path = repo_dir / "README.md"
    file_path.write_text("# Test repo")
    repo.index.add([str(file_path)])
    repo.index.commit("Initial commit")
    repo.close()

    return repo_dir


@pytest.fixture
def make_settings():
    """Factory for GenerationSettings with quiet defaults (no skips, 1 commit/day)."""

    def _make(**overrides):
        data = {
            "date_range": ("2020-01-01", "2020-01-05"),
            "commit_range": (1, 1),
            "monthly_skip_range": (0, 0),
            "skip_dates": [],
            "weekday_skip_chance": {},
            "message_file": None,
            "uniqueness": 1.0,
        }
        data.update(overrides)
        return GenerationSettings.model_validate(data)

    return _make
