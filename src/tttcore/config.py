"""Environment-first settings for the game shell.

Every value has a default so the package works without any configuration.
CLI flags take precedence over what is loaded here.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, TypeVar, Union

from .ai import Difficulty
from .game_basics import SYMBOLS, parse_mark

DEFAULT_AI_DELAY = 0.45

T = TypeVar("T")


class GameMode(Enum):
    HUMAN = "human"
    CPU = "cpu"

    @classmethod
    def parse(cls, value: Union[str, "GameMode"]) -> "GameMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown mode {value!r} (expected 'human' or 'cpu')") from None


@dataclass(frozen=True)
class Settings:
    ai_delay: float = DEFAULT_AI_DELAY
    difficulty: str = "medium"
    ai_mark: str = "O"
    mode: str = "cpu"
    seed: Optional[int] = None


def _env(name: str) -> str | None:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return None
    return v.strip()


def _checked(name: str, raw: str, parse: Callable[[str], T]) -> T:
    try:
        return parse(raw)
    except ValueError as e:
        raise ValueError(f"{name}: {e}") from None


def load_settings() -> Settings:
    """Read ``TTT_*`` environment variables.

    Order: env var -> built-in default. Malformed values raise ValueError.
    """
    delay_raw = _env("TTT_AI_DELAY")
    seed_raw = _env("TTT_SEED")
    try:
        delay = float(delay_raw) if delay_raw is not None else DEFAULT_AI_DELAY
    except ValueError:
        raise ValueError(f"TTT_AI_DELAY must be a number, got {delay_raw!r}") from None
    if delay < 0:
        raise ValueError(f"TTT_AI_DELAY must be >= 0, got {delay}")
    try:
        seed = int(seed_raw) if seed_raw is not None else None
    except ValueError:
        raise ValueError(f"TTT_SEED must be an integer, got {seed_raw!r}") from None
    difficulty = _checked("TTT_DIFFICULTY", _env("TTT_DIFFICULTY") or "medium", Difficulty.parse)
    mark = _checked("TTT_AI_MARK", _env("TTT_AI_MARK") or "O", parse_mark)
    mode = _checked("TTT_MODE", _env("TTT_MODE") or "cpu", GameMode.parse)
    return Settings(
        ai_delay=delay,
        difficulty=difficulty.value,
        ai_mark=SYMBOLS[mark],
        mode=mode.value,
        seed=seed,
    )
