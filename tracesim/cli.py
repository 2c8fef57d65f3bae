"""Command line driver.

    gunzip -c trace.gz | tracesim -a 2 -l 32 -s 64 -mp 30
    tracesim -a 4 trace.gz --plot results/breakdown.png
"""
import argparse
import logging
import sys

from tracesim.config import Config, CacheConfig
from tracesim.errors import ConfigError
from tracesim.model.stats import render_report
from tracesim.simulator import Simulator
from tracesim.utils.trace_reader import TraceReader, is_stdin, open_trace

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog='tracesim',
        description='Replay a memory trace against a set-associative cache model')
    parser.add_argument('tracefile', nargs='?', default='-',
                        help='memory trace file, optionally .gz (default: stdin)')
    parser.add_argument('-a', dest='associativity', metavar='assoc', type=int,
                        default=Config.associativity, help='associativity of the cache')
    parser.add_argument('-l', dest='block_size', metavar='blksz', type=int,
                        default=Config.block_size, help='block size (in bytes) of the cache')
    parser.add_argument('-s', dest='cache_size_kb', metavar='size', type=int,
                        default=Config.cache_size_kb, help='size (in KB) of the cache')
    parser.add_argument('-mp', dest='miss_penalty', metavar='mispen', type=int,
                        default=Config.miss_penalty, help='miss penalty (in cycles)')
    parser.add_argument('-dp', '--dirty-penalty', dest='dirty_penalty', metavar='dirtypen',
                        type=int, default=Config.dirty_penalty,
                        help='dirty writeback penalty (in cycles)')
    parser.add_argument('--legacy-index', action='store_true',
                        help='mask the set index with the block count (legacy cachesim behaviour)')
    parser.add_argument('--legacy-aging', action='store_true',
                        help='age only the first line of a set (legacy cachesim behaviour)')
    parser.add_argument('--compat', action='store_true',
                        help='shorthand for --legacy-index --legacy-aging')
    parser.add_argument('--skip-malformed', action='store_true',
                        help='skip malformed trace lines instead of stopping at the first one')
    parser.add_argument('--plot', metavar='PATH',
                        help='save a hit/miss breakdown chart to PATH')
    parser.add_argument('-v', '--verbose', action='store_true', help='debug logging')
    return parser


def config_from_args(args):
    return CacheConfig(associativity=args.associativity,
                       block_size=args.block_size,
                       cache_size_kb=args.cache_size_kb,
                       miss_penalty=args.miss_penalty,
                       dirty_penalty=args.dirty_penalty,
                       legacy_index=args.legacy_index or args.compat,
                       legacy_aging=args.legacy_aging or args.compat)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s: %(message)s')

    try:
        config = config_from_args(args)
    except ConfigError as e:
        parser.error(str(e))

    print(config.describe())

    try:
        stream = open_trace(args.tracefile)
    except OSError as e:
        logger.error("cannot open trace %s: %s", args.tracefile, e)
        return 1

    simulator = Simulator(config)
    reader = TraceReader(stream, skip_malformed=args.skip_malformed)
    try:
        stats = simulator.run(reader)
    finally:
        if is_stdin(args.tracefile):
            # leave the process's stdin open
            stream.detach()
        else:
            stream.close()

    if reader.malformed:
        logger.warning("%d malformed trace line(s)", reader.malformed)
    print(render_report(stats), end='')

    if args.plot:
        from tracesim.utils.plotter import plot_breakdown
        print(f"Chart saved to: {plot_breakdown(stats, args.plot)}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
