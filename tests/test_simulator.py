import io
import unittest

from tracesim.config import CacheConfig
from tracesim.model.cache import AccessKind
from tracesim.simulator import Simulator, simulate
from tracesim.utils.trace_generator import PATTERNS, generate_trace, write_trace
from tracesim.utils.trace_reader import AccessRecord, TraceReader

CONFIGS = [
    CacheConfig(associativity=1, block_size=32, cache_size_kb=1),
    CacheConfig(associativity=2, block_size=32, cache_size_kb=1),
    CacheConfig(associativity=4, block_size=64, cache_size_kb=2, miss_penalty=50),
    CacheConfig(associativity=4, block_size=32, cache_size_kb=1,
                legacy_index=True, legacy_aging=True),
]


class TestSimulatorExamples(unittest.TestCase):

    def test_direct_mapped_example(self):
        cfg = CacheConfig(associativity=1, block_size=32, cache_size_kb=1)
        sim = Simulator(cfg)
        sim.step(AccessRecord(AccessKind.LOAD, 0x0, 1))
        self.assertEqual(sim.stats.load_misses, 1)
        self.assertEqual(sim.stats.cycles, 1 + cfg.miss_penalty)
        sim.step(AccessRecord(AccessKind.LOAD, 0x0, 1))
        self.assertEqual(sim.stats.load_hits, 1)
        self.assertEqual(sim.stats.cycles, 2 + cfg.miss_penalty)

    def test_dirty_eviction_example(self):
        stats = simulate(CacheConfig(associativity=1, block_size=32, cache_size_kb=1),
                         [AccessRecord(AccessKind.STORE, 0x0, 1),
                          AccessRecord(AccessKind.LOAD, 0x400, 1)])
        self.assertEqual(stats.dirty_evictions, 1)
        self.assertEqual(stats.cycles, (1 + 30) + (1 + 30 + 2))


class TestLegacyCompat(unittest.TestCase):

    def test_two_way_compat_sequence(self):
        # 2-way, 1KB, 32B blocks: 32 slots, index masked with 31, tag from bit 9.
        # 0x0/0x400/0x800/0xc00 share window [0, 1]; 0x20/0x420/0x820 use [1, 2].
        cfg = CacheConfig(associativity=2, block_size=32, cache_size_kb=1,
                          legacy_index=True, legacy_aging=True)
        L, S = AccessKind.LOAD, AccessKind.STORE
        steps = [
            (S, 0x000, False, False),   # fills slot 1 (last free), dirty
            (L, 0x400, False, False),   # fills slot 0
            (L, 0x800, False, False),   # priority tie, evicts slot 0
            (L, 0xc00, False, False),   # slot 0 again
            (L, 0x000, True, False),    # still in slot 1
            (L, 0x020, True, False),    # tag 0 in slot 1 matches from window [1, 2]
            (S, 0x420, False, False),   # fills slot 2
            (L, 0x820, False, True),    # evicts dirty slot 1
        ]
        sim = Simulator(cfg)
        for kind, address, hit, writeback in steps:
            with self.subTest(address=hex(address)):
                result = sim.step(AccessRecord(kind, address, 1))
                self.assertEqual(tuple(result), (hit, writeback))

        stats = sim.stats
        self.assertEqual((stats.load_hits, stats.load_misses,
                          stats.store_hits, stats.store_misses), (2, 4, 0, 2))
        self.assertEqual(stats.dirty_evictions, 1)
        self.assertEqual(stats.cycles, 8 + 6 * 30 + 2)

    def test_two_way_default_differs(self):
        trace = [AccessRecord(AccessKind.LOAD, a, 1) for a in (0x000, 0x020)]
        default = simulate(CacheConfig(associativity=2, block_size=32, cache_size_kb=1),
                           trace)
        compat = simulate(CacheConfig(associativity=2, block_size=32, cache_size_kb=1,
                                      legacy_index=True, legacy_aging=True), trace)
        self.assertEqual(default.load_misses, 2)
        self.assertEqual(compat.load_hits, 1)


class TestSimulatorProperties(unittest.TestCase):

    def test_counter_invariants(self):
        for cfg in CONFIGS:
            for pattern in PATTERNS:
                with self.subTest(config=cfg, pattern=pattern):
                    trace = generate_trace(size=1500, pattern=pattern, seed=3,
                                           block_size=cfg.block_size,
                                           stride=cfg.cache_size_kb * 1024)
                    stats = simulate(cfg, trace)
                    self.assertEqual(stats.memory_accesses, len(trace))
                    self.assertEqual(stats.load_hits + stats.load_misses + stats.store_hits
                                     + stats.store_misses, len(trace))
                    self.assertEqual(stats.instructions,
                                     sum(r.instruction_count for r in trace))
                    self.assertGreaterEqual(stats.cycles, stats.instructions)
                    self.assertEqual(stats.cycles,
                                     stats.instructions
                                     + stats.misses * cfg.miss_penalty
                                     + stats.dirty_evictions * cfg.dirty_penalty)
                    self.assertLessEqual(stats.dirty_evictions, stats.misses)

    def test_hit_only_on_valid_matching_line(self):
        for cfg in CONFIGS:
            with self.subTest(config=cfg):
                sim = Simulator(cfg)
                for record in generate_trace(size=800, pattern='mixed', seed=11,
                                             block_size=cfg.block_size):
                    slot = sim.cache.lookup(record.address)
                    result = sim.step(record)
                    self.assertEqual(result.hit, slot is not None)
                    if result.hit:
                        self.assertFalse(result.dirty_writeback)

    def test_replay_is_deterministic(self):
        trace = generate_trace(size=2000, pattern='random', seed=5)
        for cfg in CONFIGS:
            with self.subTest(config=cfg):
                self.assertEqual(simulate(cfg, trace), simulate(cfg, trace))

    def test_compat_matches_default_when_direct_mapped(self):
        trace = generate_trace(size=2000, pattern='mixed', seed=9)
        default = CacheConfig(associativity=1, block_size=32, cache_size_kb=4)
        compat = CacheConfig(associativity=1, block_size=32, cache_size_kb=4,
                             legacy_index=True, legacy_aging=True)
        self.assertEqual(simulate(default, trace), simulate(compat, trace))

    def test_conflict_pattern_thrashes_small_sets(self):
        cfg = CacheConfig(associativity=4, block_size=32, cache_size_kb=1)
        trace = generate_trace(size=400, pattern='conflict', store_ratio=0.0,
                               block_size=32, stride=1024)
        stats = simulate(cfg, trace)
        # eight lines cycling through a four-way LRU set never hit
        self.assertEqual(stats.hits, 0)

    def test_runs_from_trace_text(self):
        trace = generate_trace(size=300, pattern='loop', seed=1)
        buf = io.StringIO()
        write_trace(trace, buf)
        buf.seek(0)
        cfg = CONFIGS[1]
        self.assertEqual(simulate(cfg, TraceReader(buf)), simulate(cfg, trace))


class TestTraceGenerator(unittest.TestCase):

    def test_patterns(self):
        for pattern in PATTERNS:
            with self.subTest(pattern=pattern):
                trace = generate_trace(size=250, pattern=pattern, seed=0)
                self.assertEqual(len(trace), 250)
                self.assertTrue(all(r.address >= 0 for r in trace))
                self.assertTrue(all(1 <= r.instruction_count <= 4 for r in trace))

    def test_seed_is_reproducible(self):
        self.assertEqual(generate_trace(size=100, pattern='random', seed=4),
                         generate_trace(size=100, pattern='random', seed=4))

    def test_store_ratio(self):
        loads = generate_trace(size=100, store_ratio=0.0, seed=1)
        self.assertTrue(all(r.kind is AccessKind.LOAD for r in loads))
        stores = generate_trace(size=100, store_ratio=1.0, seed=1)
        self.assertTrue(all(r.kind is AccessKind.STORE for r in stores))

    def test_unknown_pattern(self):
        with self.assertRaises(ValueError):
            generate_trace(size=10, pattern='zigzag')


if __name__ == '__main__':
    unittest.main()
