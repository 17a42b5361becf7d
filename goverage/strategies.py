"""Report strategies and a registry to look them up by name."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import Sequence

from goverage.cover import Profile
from goverage.utils import percent


class Strategy(ABC):
    """A way of reporting coverage profiles."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The strategy's registry name."""

    @abstractmethod
    def execute(self, profiles: Sequence[Profile], output_dir: str):
        """Produce the report for ``profiles`` into ``output_dir``."""


class Registry:
    """Strategies keyed by name."""

    def __init__(self, *strategies: Strategy) -> None:
        self._strategies = {s.name: s for s in strategies}

    def get(self, name: str) -> Strategy | None:
        """Return the strategy called ``name``, or None."""
        return self._strategies.get(name)


class StdoutStrategy(Strategy):
    """A strategy that writes a per-file statement summary to standard output."""

    @property
    def name(self) -> str:
        return "Stdout"

    def execute(self, profiles: Sequence[Profile], output_dir: str) -> None:
        """Print each profile's statement coverage; ``output_dir`` is unused."""
        for profile in profiles:
            total = sum(block.num_stmt for block in profile.blocks)
            covered = sum(block.num_stmt for block in profile.blocks if block.count > 0)
            sys.stdout.write(f"{profile.file_name}\t{percent(covered, total):.2f}%\n")
        return None