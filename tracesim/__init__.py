"""tracesim: trace-driven set-associative cache simulator."""

from tracesim.config import Config, CacheConfig
from tracesim.errors import TraceSimError, ConfigError, TraceFormatError
from tracesim.model.cache import AccessKind, AccessResult, CacheLine, CacheModel
from tracesim.model.stats import Statistics, render_report
from tracesim.simulator import Simulator, simulate

__version__ = "0.1"
