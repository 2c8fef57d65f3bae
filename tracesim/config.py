import math

from tracesim.errors import ConfigError


class Config:
    # Cache geometry
    associativity = 1          # lines per set
    block_size = 32            # bytes per block
    cache_size_kb = 64         # total capacity in KB

    # Timing
    miss_penalty = 30          # cycles charged on every miss
    dirty_penalty = 2          # cycles charged on a dirty writeback

    # Legacy cachesim compatibility
    legacy_index = False       # mask the index with num_blocks - 1
    legacy_aging = False       # replay the single-slot priority aging loop


class CacheConfig:
    """Immutable cache parameters plus the quantities derived from them.

    Sizes are expected to be powers of two; the shift/mask arithmetic
    silently misbehaves otherwise and that is not checked here.
    """

    _FIELDS = ('associativity', 'block_size', 'cache_size_kb',
               'miss_penalty', 'dirty_penalty', 'legacy_index', 'legacy_aging')

    def __init__(self, associativity=Config.associativity, block_size=Config.block_size,
                 cache_size_kb=Config.cache_size_kb, miss_penalty=Config.miss_penalty,
                 dirty_penalty=Config.dirty_penalty, legacy_index=Config.legacy_index,
                 legacy_aging=Config.legacy_aging):
        for name, value, minimum in (('associativity', associativity, 1),
                                     ('block_size', block_size, 1),
                                     ('cache_size_kb', cache_size_kb, 1),
                                     ('miss_penalty', miss_penalty, 0),
                                     ('dirty_penalty', dirty_penalty, 0)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
            if value < minimum:
                raise ConfigError(f"{name} must be >= {minimum}, got {value}")

        num_blocks = (1024 * cache_size_kb) // block_size
        if num_blocks < associativity:
            raise ConfigError(
                f"cache of {cache_size_kb} KB with {block_size} byte blocks holds "
                f"{num_blocks} blocks, fewer than associativity {associativity}")
        if num_blocks % associativity:
            raise ConfigError(
                f"{num_blocks} blocks cannot be split into sets of {associativity}")
        num_sets = num_blocks // associativity

        set_ = object.__setattr__
        set_(self, 'associativity', associativity)
        set_(self, 'block_size', block_size)
        set_(self, 'cache_size_kb', cache_size_kb)
        set_(self, 'miss_penalty', miss_penalty)
        set_(self, 'dirty_penalty', dirty_penalty)
        set_(self, 'legacy_index', bool(legacy_index))
        set_(self, 'legacy_aging', bool(legacy_aging))

        # derived addressing parameters: TAG | INDEX | OFFSET
        set_(self, 'num_blocks', num_blocks)
        set_(self, 'num_sets', num_sets)
        set_(self, 'offset_bits', int(math.log2(block_size)))
        set_(self, 'index_bits', int(math.log2(num_sets)))
        set_(self, 'tag_shift', self.index_bits + self.offset_bits)
        set_(self, 'index_mask', (num_blocks if legacy_index else num_sets) - 1)

    @classmethod
    def from_defaults(cls, **overrides):
        values = {name: getattr(Config, name) for name in cls._FIELDS}
        values.update(overrides)
        return cls(**values)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other):
        if not isinstance(other, CacheConfig):
            return NotImplemented
        return all(getattr(self, f) == getattr(other, f) for f in self._FIELDS)

    def __hash__(self):
        return hash(tuple(getattr(self, f) for f in self._FIELDS))

    def __repr__(self):
        args = ', '.join(f"{f}={getattr(self, f)!r}" for f in self._FIELDS)
        return f"CacheConfig({args})"

    def describe(self):
        """Configuration echo printed before the simulation starts."""
        lines = [
            "Cache parameters:",
            f"\tCache Size (KB)\t\t\t{self.cache_size_kb}",
            f"\tCache Associativity\t\t{self.associativity}",
            f"\tCache Block Size (bytes)\t{self.block_size}",
            f"\tMiss penalty (cyc)\t\t{self.miss_penalty}",
        ]
        if self.dirty_penalty != Config.dirty_penalty:
            lines.append(f"\tDirty penalty (cyc)\t\t{self.dirty_penalty}")
        if self.legacy_index or self.legacy_aging:
            modes = [m for m, on in (('index', self.legacy_index),
                                     ('aging', self.legacy_aging)) if on]
            lines.append(f"\tLegacy behaviour\t\t{', '.join(modes)}")
        return "\n".join(lines) + "\n"
