import numpy as np

from tracesim.model.cache import AccessKind
from tracesim.utils.trace_reader import AccessRecord

PATTERNS = ('sequential', 'random', 'mixed', 'loop', 'conflict')


def _addresses(size, pattern, block_size, rng, stride):
    if pattern == 'sequential':
        # Sequential access pattern
        return np.arange(size) * block_size

    elif pattern == 'random':
        return rng.integers(0, size * block_size, size)

    elif pattern == 'mixed':
        # Mix of sequential and random, shuffled together
        trace = np.concatenate([np.arange(size // 2) * block_size,
                                rng.integers(0, size * block_size, size - size // 2)])
        rng.shuffle(trace)
        return trace

    elif pattern == 'loop':
        # Loop pattern (simulating program loops)
        base_pattern = np.arange(100) * block_size
        return np.resize(base_pattern, size)

    elif pattern == 'conflict':
        # eight blocks `stride` bytes apart, all landing in the same set
        hot = np.arange(8) * stride
        return np.resize(hot, size)

    raise ValueError(f"Unknown pattern type: {pattern}")


def generate_trace(size=10000, pattern='mixed', store_ratio=0.3, block_size=32,
                   max_icount=4, seed=None, stride=64 * 1024):
    """Generate a synthetic list of AccessRecords.

    `stride` only matters for the conflict pattern: pass the cache size in
    bytes so every address maps to set 0.
    """
    rng = np.random.default_rng(seed)
    addresses = _addresses(size, pattern, block_size, rng, stride)
    stores = rng.random(size) < store_ratio
    icounts = rng.integers(1, max_icount + 1, size)
    return [AccessRecord(AccessKind.STORE if st else AccessKind.LOAD, int(a), int(ic))
            for a, st, ic in zip(addresses, stores, icounts)]


def write_trace(records, fh, marker='#'):
    """Write records in the trace line format read by TraceReader."""
    for r in records:
        fh.write(f"{marker} {int(r.kind)} {r.address:x} {r.instruction_count}\n")
