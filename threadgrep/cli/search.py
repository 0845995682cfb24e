"""
Search CLI implementation - can be imported and executed directly.
"""
import argparse
import logging
import sys
from functools import partial
from pathlib import Path
from typing import List, Optional

from threadgrep import __version__
from threadgrep.exceptions import SearchPatternError, WalkRootError
from threadgrep.parallel_config import get_config
from threadgrep.search_core.file_search import search_file
from threadgrep.search_core.matcher import compile_search_pattern
from threadgrep.search_core.synchronized_writer import SharedSink
from threadgrep.search_core.walker import Walker
from threadgrep.search_core.worker_pool import WorkerPool
from threadgrep.utils import configure_logging, get_logger, log_with_context

logger = get_logger("cli-search")

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def non_negative_int(value: str) -> int:
    """argparse type for counts that may be zero"""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer")
    if number < 0:
        raise argparse.ArgumentTypeError(f"{value!r} must not be negative")
    return number


def positive_int(value: str) -> int:
    number = non_negative_int(value)
    if number == 0:
        raise argparse.ArgumentTypeError(f"{value!r} must be positive")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='threadgrep',
        description='Search text files below PATH for lines matching PATTERN, '
                    'honoring .gitignore and .ignore files',
    )
    parser.add_argument('pattern', help='Regular expression to search for')
    parser.add_argument('paths', nargs='*', type=Path, metavar='PATH',
                        help='Files or directories to search (default: .)')
    parser.add_argument('-d', '--max-depth', type=non_negative_int, default=None,
                        help='Limit directory traversal depth. Unlimited by default; '
                             '0 searches only the files directly inside PATH')
    parser.add_argument('-N', '--no-line-number', action='store_true',
                        help='Do not prefix matches with line numbers')
    parser.add_argument('-i', '--ignore-case', action='store_true',
                        help='Match case-insensitively')
    parser.add_argument('-j', '--threads', type=positive_int, default=None,
                        help='Number of worker threads (default: THREADGREP_MAX_WORKERS or CPU count)')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Log more (-v debug, -vv trace)')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments"""
    return build_parser().parse_args(args)


def verbosity_level(verbose: int) -> Optional[str]:
    if verbose >= 2:
        return 'TRACE'
    if verbose == 1:
        return 'DEBUG'
    return None


def run_search(args: argparse.Namespace, stream=None) -> int:
    """
    Run a search with parsed arguments

    Args:
        args: Parsed command line arguments
        stream: Destination for results (defaults to stdout)

    Returns:
        Process exit status
    """
    try:
        pattern = compile_search_pattern(args.pattern, ignore_case=args.ignore_case)
    except SearchPatternError as e:
        logger.error(str(e))
        return EXIT_USAGE

    roots = args.paths or [Path('.')]
    walker = Walker(max_depth=args.max_depth)
    try:
        candidates = walker.walk(roots)
    except WalkRootError as e:
        logger.error(str(e))
        return EXIT_FATAL

    sink = SharedSink(stream if stream is not None else sys.stdout)
    config = get_config(args.threads)
    show_line_numbers = not args.no_line_number

    with WorkerPool.from_config(config) as pool:
        for file_path in candidates:
            pool.execute(partial(search_file, file_path, pattern, sink, show_line_numbers))

    stats = pool.stats
    log_with_context(
        logger, logging.DEBUG,
        f"Searched {stats.total} files ({stats.failed} task failures)",
        files=stats.total, failed=stats.failed,
    )
    return EXIT_OK


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for search CLI"""
    parsed_args = parse_args(args)
    configure_logging(log_level=verbosity_level(parsed_args.verbose))
    try:
        return run_search(parsed_args)
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
