import logging
from pathlib import Path
from typing import List, Optional, Sequence, Set

from historygen.constants import SYNTHETIC_MESSAGE_PREFIX, SYNTHETIC_TOKEN_LENGTH
from historygen.exceptions import MessagePoolError, MessagePoolUnavailable
from historygen.randomness import RandomSource
from historygen.schemas import GenerationSettings

logger = logging.getLogger(__name__)


class MessagePool:
    """
    Rotating pool of commit messages.

    Entries are tracked by index so duplicate lines count as separate
    entries. A rotation ends when every entry has been used, or earlier
    when a random draw exceeds the uniqueness threshold.
    """

    def __init__(self, messages: Sequence[str]):
        if not messages:
            raise MessagePoolError("Message pool is empty.")
        self.messages: List[str] = list(messages)
        self.used: Set[int] = set()

    def __len__(self) -> int:
        return len(self.messages)

    def available(self) -> List[int]:
        return [i for i in range(len(self.messages)) if i not in self.used]

    def next(self, uniqueness: float, rng: RandomSource) -> str:
        available = self.available()
        if not available or rng.uniform_real() > uniqueness:
            self.used.clear()
            available = self.available()

        index = available[rng.uniform_int(0, len(available) - 1)]
        self.used.add(index)
        return self.messages[index]


def load_message_pool(path: str | Path) -> MessagePool:
    """
    Reads a newline-delimited message file, keeping non-blank lines.
    Raises MessagePoolUnavailable if the file cannot be read and
    MessagePoolError if it holds no messages or is not valid UTF-8.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except (FileNotFoundError, IsADirectoryError, PermissionError) as e:
        logger.warning(f"Message file '{path}' is unavailable: {e}")
        raise MessagePoolUnavailable(f"Message file '{path}' not found.") from e
    except UnicodeDecodeError as e:
        logger.error(f"Message file '{path}' is not valid UTF-8: {e}")
        raise MessagePoolError(f"Message file '{path}' is not valid UTF-8.") from e

    lines = [line.strip() for line in content.splitlines() if line.strip()]
    if not lines:
        raise MessagePoolError(f"Message file '{path}' is empty.")

    logger.info(f"Loaded {len(lines)} commit messages from '{path}'")
    return MessagePool(lines)


class MessageProvider:
    """Hands out one commit message per commit."""

    def __init__(
        self,
        pool: Optional[MessagePool] = None,
        uniqueness: float = 1.0,
        rng: Optional[RandomSource] = None,
    ):
        self.pool = pool
        self.uniqueness = uniqueness
        self.rng = rng or RandomSource()

    @classmethod
    def from_settings(
        cls, settings: GenerationSettings, rng: Optional[RandomSource] = None
    ) -> "MessageProvider":
        pool = None
        if settings.message_file is not None:
            pool = load_message_pool(settings.message_file)
        return cls(pool=pool, uniqueness=settings.uniqueness, rng=rng)

    @property
    def is_synthetic(self) -> bool:
        return self.pool is None

    def next(self) -> str:
        if self.pool is None:
            return f"{SYNTHETIC_MESSAGE_PREFIX} {self.rng.token(SYNTHETIC_TOKEN_LENGTH)}"
        return self.pool.next(self.uniqueness, self.rng)
