import logging

from tracesim.model.cache import CacheModel
from tracesim.model.stats import Statistics

logger = logging.getLogger(__name__)


class Simulator:
    """Feeds access records through a cache model and keeps the totals."""

    def __init__(self, config):
        self.config = config
        self.cache = CacheModel(config)
        self.stats = Statistics.for_config(config)

    def step(self, record):
        result = self.cache.access(record.kind, record.address)
        self.stats.record(record.kind, record.instruction_count, result)
        return result

    def run(self, records):
        for record in records:
            self.step(record)
        logger.info("processed %d records", self.stats.memory_accesses)
        return self.stats


def simulate(config, records):
    """Run `records` against a fresh cache built from `config`."""
    return Simulator(config).run(records)
