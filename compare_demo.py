"""Quick CLI demo comparing the LRU model with legacy-compatible mode.

Run from project root:
    python compare_demo.py
"""
from tracesim.config import CacheConfig
from tracesim.model.stats import render_report
from tracesim.simulator import simulate
from tracesim.utils.trace_generator import generate_trace


def run_demo(trace_size=2000, associativity=4, block_size=32, cache_size_kb=4, pattern='mixed'):
    trace = generate_trace(size=trace_size, pattern=pattern, block_size=block_size, seed=7)

    lru = CacheConfig(associativity=associativity, block_size=block_size,
                      cache_size_kb=cache_size_kb)
    compat = CacheConfig(associativity=associativity, block_size=block_size,
                         cache_size_kb=cache_size_kb, legacy_index=True, legacy_aging=True)

    print(f"Trace size: {len(trace)}, pattern: {pattern}")
    for label, config in (('LRU', lru), ('Legacy compat', compat)):
        stats = simulate(config, trace)
        print(f"== {label}")
        print(render_report(stats))


if __name__ == '__main__':
    run_demo()
