from tracesim.model.cache import AccessKind, AccessResult, CacheLine, CacheModel
from tracesim.model.stats import Statistics, render_report
