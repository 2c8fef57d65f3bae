from typing import Dict, Optional

from tracesim.config import Config
from tracesim.model.cache import AccessKind

_COUNTERS = ('instructions', 'cycles', 'memory_accesses', 'dirty_evictions',
             'load_hits', 'store_hits', 'load_misses', 'store_misses')


def _ratio(numerator: int, denominator: int) -> Optional[float]:
    if denominator == 0:
        return None
    return numerator / denominator


class Statistics:
    """Running totals for one simulation run."""

    def __init__(self, miss_penalty: int = Config.miss_penalty,
                 dirty_penalty: int = Config.dirty_penalty):
        """Initialize empty counters.

        Args:
            miss_penalty: Cycles added for every miss
            dirty_penalty: Cycles added for every dirty writeback
        """
        self.miss_penalty = miss_penalty
        self.dirty_penalty = dirty_penalty
        for name in _COUNTERS:
            setattr(self, name, 0)

    @classmethod
    def for_config(cls, config) -> 'Statistics':
        return cls(miss_penalty=config.miss_penalty, dirty_penalty=config.dirty_penalty)

    def record(self, kind, instruction_count: int, result) -> None:
        """Fold one processed trace record into the totals.

        Args:
            kind: AccessKind or raw trace code of the access
            instruction_count: Instructions attributed to this record
            result: AccessResult returned by the cache model
        """
        is_store = AccessKind.from_code(kind) is AccessKind.STORE
        self.cycles += instruction_count
        self.instructions += instruction_count
        self.memory_accesses += 1

        if result.hit:
            if is_store:
                self.store_hits += 1
            else:
                self.load_hits += 1
        else:
            if is_store:
                self.store_misses += 1
            else:
                self.load_misses += 1
            self.cycles += self.miss_penalty

        if result.dirty_writeback:
            self.cycles += self.dirty_penalty
            self.dirty_evictions += 1

    @property
    def hits(self) -> int:
        return self.load_hits + self.store_hits

    @property
    def misses(self) -> int:
        return self.load_misses + self.store_misses

    @property
    def loads(self) -> int:
        return self.load_hits + self.load_misses

    @property
    def stores(self) -> int:
        return self.store_hits + self.store_misses

    @property
    def miss_rate(self) -> Optional[float]:
        return _ratio(self.misses, self.memory_accesses)

    @property
    def read_miss_rate(self) -> Optional[float]:
        """Misses among loads; None when the trace held no loads."""
        return _ratio(self.load_misses, self.memory_accesses - self.stores)

    @property
    def cpi(self) -> Optional[float]:
        return _ratio(self.cycles, self.instructions)

    def summary(self) -> Dict[str, Optional[float]]:
        data = {name: getattr(self, name) for name in _COUNTERS}
        data.update(miss_rate=self.miss_rate,
                    read_miss_rate=self.read_miss_rate,
                    cpi=self.cpi)
        return data

    def __eq__(self, other):
        if not isinstance(other, Statistics):
            return NotImplemented
        return all(getattr(self, n) == getattr(other, n) for n in _COUNTERS)

    def __repr__(self):
        counts = ', '.join(f"{n}={getattr(self, n)}" for n in _COUNTERS)
        return f"Statistics({counts})"


def _fmt(value: Optional[float]) -> str:
    return 'n/a' if value is None else f"{value:.2f}"


def render_report(stats: Statistics) -> str:
    """Render the final report in the classic cachesim layout."""
    lines = [
        "Simulation results:",
        f"\texecution time {stats.cycles} cycles",
        f"\tinstructions {stats.instructions}",
        f"\tmemory accesses {stats.memory_accesses}",
        f"\toverall miss rate {_fmt(stats.miss_rate)}",
        f"\tread miss rate {_fmt(stats.read_miss_rate)}",
        f"\ttotal CPI {_fmt(stats.cpi)}",
        f"dirty evictions {stats.dirty_evictions}",
        f"load_misses {stats.load_misses}",
        f"store_misses {stats.store_misses}",
        f"load_hits {stats.load_hits}",
        f"store_hits {stats.store_hits}",
    ]
    return "\n".join(lines) + "\n"
