import io
import signal
from datetime import date

import git
import pytest
from rich.console import Console

from historygen.config import RuntimeSettings
from historygen.engine import HistoryEngine
from historygen.exceptions import MessagePoolUnavailable, VersionControlError
from historygen.schemas import DayDecision

# --- Fixtures ---


@pytest.fixture
def console():
    return Console(file=io.StringIO(), force_terminal=False)


@pytest.fixture
def engine(console):
    """Engine with a fixed seed so schedules are reproducible."""
    return HistoryEngine(console, RuntimeSettings(seed=7))


# --- Schedule & messages ---


def test_build_schedule_is_reproducible_with_seed(console, make_settings):
    settings = make_settings(
        commit_range=(0, 5), weekday_skip_chance={"Saturday": 50, "Sunday": 50}
    )

    first = HistoryEngine(console, RuntimeSettings(seed=11)).build_schedule(settings)
    second = HistoryEngine(console, RuntimeSettings(seed=11)).build_schedule(settings)

    assert first == second
    assert [d.day for d in first] == [date(2020, 1, n) for n in range(1, 6)]


def test_build_schedule_respects_fixed_skips(engine, make_settings):
    schedule = engine.build_schedule(make_settings(skip_dates=["2020-01-02"]))

    assert schedule[1].decision is DayDecision.FIXED_SKIP
    assert schedule[1].commit_count == 0


def test_load_messages_reads_file(engine, make_settings, tmp_path):
    path = tmp_path / "commits.txt"
    path.write_text("fix: a\nfix: b\n", encoding="utf-8")

    provider = engine.load_messages(make_settings(message_file=str(path)))

    assert not provider.is_synthetic
    assert provider.next() in {"fix: a", "fix: b"}


def test_load_messages_missing_file(engine, make_settings, tmp_path):
    with pytest.raises(MessagePoolUnavailable):
        engine.load_messages(make_settings(message_file=str(tmp_path / "nope.txt")))


def test_synthetic_messages(engine, make_settings):
    provider = engine.synthetic_messages(make_settings())

    assert provider.is_synthetic
    assert provider.next().startswith("chore: update ")


# --- generate ---


def test_generate_commits_whole_schedule(engine, make_settings, temp_git_repo):
    settings = make_settings(commit_range=(2, 2), skip_dates=["2020-01-03"])
    schedule = engine.build_schedule(settings)

    stats = engine.generate(
        str(temp_git_repo), schedule, engine.synthetic_messages(settings)
    )

    assert stats.total_days == 5
    assert stats.processed_days == 5
    assert stats.produced_days == 4
    assert stats.fixed_skips == 1
    assert stats.total_commits == 8
    assert not stats.interrupted

    repo = git.Repo(temp_git_repo)
    dates = {c.committed_datetime.date() for c in list(repo.iter_commits())[:8]}
    repo.close()
    assert date(2020, 1, 3) not in dates
    assert len(dates) == 4


def test_generate_restores_interrupt_handler(engine, make_settings, temp_git_repo):
    before = signal.getsignal(signal.SIGINT)
    settings = make_settings()

    engine.generate(
        str(temp_git_repo),
        engine.build_schedule(settings),
        engine.synthetic_messages(settings),
    )

    assert signal.getsignal(signal.SIGINT) is before


def test_generate_invalid_repository(engine, make_settings, tmp_path):
    settings = make_settings()

    with pytest.raises(VersionControlError):
        engine.generate(
            str(tmp_path),
            engine.build_schedule(settings),
            engine.synthetic_messages(settings),
        )


def test_request_stop_without_run_is_noop(engine):
    engine.request_stop()


def test_request_stop_during_run(engine, make_settings, temp_git_repo, mocker):
    """Stopping from the progress callback ends the run after the current day."""
    settings = make_settings()
    schedule = engine.build_schedule(settings)

    def _stop(*args):
        engine.request_stop()

    mocker.patch(
        "historygen.engine.RichProgressSink.on_day_processed", side_effect=_stop
    )

    stats = engine.generate(
        str(temp_git_repo), schedule, engine.synthetic_messages(settings)
    )

    assert stats.processed_days == 1
    assert stats.interrupted


# --- publish ---


def test_publish_pushes_to_configured_remote(console, mocker):
    mock_push = mocker.patch("historygen.engine.push_commits")
    engine = HistoryEngine(console, RuntimeSettings(remote="upstream"))

    engine.publish("/repo")

    mock_push.assert_called_once_with("/repo", "upstream")
