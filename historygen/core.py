import git
import json
import logging
from datetime import date, datetime, time
from pathlib import Path
from typing import List, Optional

from .constants import COMMIT_HOUR, SCRATCH_FILE_NAME
from .exceptions import VersionControlError
from .messages import MessageProvider
from .randomness import RandomSource

# Initialize module-level logger
logger = logging.getLogger(__name__)


class GitRepositoryContext:
    def __init__(self, repo_path: str):
        self.repo_path = repo_path
        self._repo: git.Repo | None = None

    def __enter__(self) -> git.Repo:
        try:
            self._repo = git.Repo(self.repo_path, search_parent_directories=True)
            return self._repo
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise VersionControlError(
                f"'{self.repo_path}' is not a valid Git repository."
            ) from e

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._repo:
            self._repo.close()


def format_commit_date(day: date, hour: int = COMMIT_HOUR) -> str:
    """
    Renders ``day`` at ``hour`` local time in git's internal date format
    ("<unix seconds> <+hhmm>"), which GitPython passes through untouched.
    """
    moment = datetime.combine(day, time(hour=hour)).astimezone()
    return f"{int(moment.timestamp())} {moment.strftime('%z')}"


class CommitEmitter:
    """
    Writes backdated commits into a repository, one scratch-file change per
    commit. Commits are strictly sequential: each one stages only the
    scratch file state it just wrote.
    """

    def __init__(
        self,
        repo: git.Repo,
        messages: MessageProvider,
        scratch_name: str = SCRATCH_FILE_NAME,
        commit_hour: int = COMMIT_HOUR,
        rng: Optional[RandomSource] = None,
    ):
        if repo.bare or not repo.working_tree_dir:
            raise VersionControlError("Cannot write commits into a bare repository.")
        self.repo = repo
        self.messages = messages
        self.commit_hour = commit_hour
        self.rng = rng or RandomSource()
        self.scratch_path = Path(repo.working_tree_dir) / scratch_name

    def _write_scratch(self, day: date):
        payload = {"date": day.isoformat(), "value": self.rng.uniform_real()}
        with open(self.scratch_path, "w", encoding="utf-8") as f:
            json.dump(payload, f)

    def _commit_once(self, day: date, commit_date: str) -> str:
        self._write_scratch(day)
        self.repo.index.add([str(self.scratch_path)])
        commit = self.repo.index.commit(
            self.messages.next(),
            author_date=commit_date,
            commit_date=commit_date,
        )
        return commit.hexsha

    def commit_day(self, day: date, count: int) -> List[str]:
        """
        Creates ``count`` commits dated ``day`` and returns their hashes.
        The first failure aborts the rest of the day; the raised error's
        ``created`` holds the number of commits already made.
        """
        commit_date = format_commit_date(day, self.commit_hour)
        hashes = []
        for index in range(count):
            try:
                hashes.append(self._commit_once(day, commit_date))
            except (git.exc.GitError, OSError, ValueError) as e:
                logger.error(
                    f"Commit {index + 1}/{count} for {day} failed: {e}", exc_info=True
                )
                raise VersionControlError(
                    f"Commit {index + 1}/{count} for {day} failed: {e}",
                    created=len(hashes),
                ) from e

        if count:
            logger.info(f"Created {count} commits for {day}")
        return hashes


def push_commits(repo_path: str, remote_name: str = "origin") -> None:
    """Pushes the current branch to ``remote_name``."""
    with GitRepositoryContext(repo_path) as repo:
        try:
            results = repo.remote(remote_name).push()
        except (ValueError, git.exc.GitCommandError) as e:
            logger.error(f"Push to '{remote_name}' failed: {e}", exc_info=True)
            raise VersionControlError(f"Push to '{remote_name}' failed: {e}") from e

        if not results:
            raise VersionControlError(f"Push to '{remote_name}' did not update any ref.")

        for info in results:
            if info.flags & info.ERROR:
                raise VersionControlError(
                    f"Push of '{info.local_ref}' was rejected: {info.summary.strip()}"
                )
        logger.info(f"Pushed commits to '{remote_name}'")
