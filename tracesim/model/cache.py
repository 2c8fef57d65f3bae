import enum
import logging
from collections import namedtuple

import numpy as np

logger = logging.getLogger(__name__)


class AccessKind(enum.IntEnum):
    LOAD = 0
    STORE = 1

    @classmethod
    def from_code(cls, code):
        """Trace encoding: 0 is a load, anything else is a store."""
        return cls.STORE if int(code) else cls.LOAD


AccessResult = namedtuple('AccessResult', ['hit', 'dirty_writeback'])


class CacheLine:
    """Metadata for one cache slot. No data is stored."""

    __slots__ = ('tag', 'valid', 'dirty', 'priority')

    def __init__(self):
        self.tag = 0
        self.valid = False
        self.dirty = False
        self.priority = 0

    @property
    def state(self):
        if not self.valid:
            return 'empty'
        return 'dirty' if self.dirty else 'clean'

    def __repr__(self):
        return (f"CacheLine(tag={self.tag:#x}, state={self.state}, "
                f"priority={self.priority})")


class CacheModel:
    """Set-associative cache holding only per-line metadata.

    Lines are grouped into `num_sets` contiguous sets of `associativity`
    slots. On a miss the first invalid slot of the set is filled; when the
    set is full the slot with the highest priority value is evicted, ties
    going to the lowest slot number. After every access the accessed slot
    gets priority 1 and the other lines of the set age.

    Two switches on the config reproduce legacy cachesim numbers:
    `legacy_index` masks the set index with `num_blocks - 1` and starts the
    set window at slot `index` (filling the last free slot of the window),
    and `legacy_aging` ages only the first slot
    of the window.
    """

    def __init__(self, config):
        self.config = config
        self.lines = [CacheLine() for _ in range(config.num_blocks)]

    def decompose(self, address):
        """Return (tag, set_index) for a byte address."""
        cfg = self.config
        set_index = (address >> cfg.offset_bits) & cfg.index_mask
        tag = address >> cfg.tag_shift
        return tag, set_index

    def set_slots(self, set_index):
        cfg = self.config
        if cfg.legacy_index:
            # the window starts at the raw index and may run off the end
            return [(set_index + i) % cfg.num_blocks for i in range(cfg.associativity)]
        base = set_index * cfg.associativity
        return range(base, base + cfg.associativity)

    def lookup(self, address):
        """Return the slot number holding `address`, or None. Does not touch state."""
        tag, set_index = self.decompose(address)
        for slot in self.set_slots(set_index):
            line = self.lines[slot]
            if line.valid and line.tag == tag:
                return slot
        return None

    def access(self, kind, address):
        """Apply one load or store and return an AccessResult."""
        is_store = AccessKind.from_code(kind) is AccessKind.STORE
        tag, set_index = self.decompose(address)
        slots = self.set_slots(set_index)
        legacy = self.config.legacy_index

        invalid_slot = None
        hit_slot = None
        for slot in slots:
            line = self.lines[slot]
            if not line.valid:
                # legacy walk keeps the last free slot it passes
                if invalid_slot is None or legacy:
                    invalid_slot = slot
                continue
            if line.tag == tag:
                hit_slot = slot
                break

        if hit_slot is not None:
            line = self.lines[hit_slot]
            line.dirty = line.dirty or is_store
            logger.debug("hit %#x set %d slot %d", address, set_index, hit_slot)
            self._age(slots, hit_slot, line.priority)
            return AccessResult(True, False)

        dirty_writeback = False
        if invalid_slot is not None:
            target = invalid_slot
            line = self.lines[target]
            line.valid = True
            previous = None
            logger.debug("fill %#x set %d slot %d", address, set_index, target)
        else:
            target = self._victim(slots)
            line = self.lines[target]
            dirty_writeback = line.dirty
            previous = line.priority
            logger.debug("evict %s tag %#x from set %d slot %d for %#x",
                         'dirty' if dirty_writeback else 'clean', line.tag,
                         set_index, target, address)

        line.dirty = is_store
        line.tag = tag
        self._age(slots, target, previous)
        return AccessResult(False, dirty_writeback)

    def _victim(self, slots):
        # argmax returns the first maximum, i.e. the lowest slot on a tie
        priorities = [self.lines[slot].priority for slot in slots]
        return slots[int(np.argmax(priorities))]

    def _age(self, slots, accessed, previous):
        """Update priorities after `accessed` was used.

        `previous` is the accessed line's priority before the access, or
        None when the line was just filled from the invalid state.
        """
        lines = self.lines
        if self.config.legacy_aging:
            first = lines[slots[0]]
            current = lines[accessed].priority
            for _ in slots:
                if first.priority < current:
                    first.priority += 1
        else:
            for slot in slots:
                if slot == accessed or not lines[slot].valid:
                    continue
                if previous is None or lines[slot].priority < previous:
                    lines[slot].priority += 1
        lines[accessed].priority = 1

    def set_state(self, set_index):
        """Snapshot of a set as (tag, state, priority) tuples, for inspection."""
        return [(self.lines[s].tag, self.lines[s].state, self.lines[s].priority)
                for s in self.set_slots(set_index)]
