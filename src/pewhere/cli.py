import argparse
import logging
import os
import signal
import sys
import textwrap

from . import Where, Processor, Settings, CancellationToken, Architecture, split_list
from .errors import Canceled
from .utils.profiling import profile_main

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_CANCELED = 10
EXIT_ERROR = 11
EXIT_NOT_FOUND = 111


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pewhere',
        description='Locate files by name across directory trees and report which of them are 32-bit or 64-bit '
                    'Portable Executable images.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Examples:
              pewhere --filenames git.exe,msbuild.exe --directories "C:\\,D:\\Tools"
              pewhere --filenames python.exe --directories ~ --skip-directories ~/.cache --filter x64

            List entries are comma-separated and may reference environment variables.
            Exit status: 0 on success, 111 when nothing matched, 10 when canceled, 11 on other errors.
            ''').strip()
    )
    parser.add_argument(
        '--filenames',
        metavar='LIST',
        required=True,
        help='Comma-separated list of file names to search for (e.g. "git.exe,msbuild.exe")')
    parser.add_argument(
        '--directories',
        metavar='LIST',
        required=True,
        help='Comma-separated list of root directories to search')
    parser.add_argument(
        '--skip-directories',
        metavar='LIST',
        help='Comma-separated list of directories to skip. Matching is by exact path, not by prefix.')
    parser.add_argument(
        '--filter',
        choices=[a.value for a in Architecture],
        default=Architecture.NONE.value,
        help='Only report PE images of this architecture; "none" (default) applies no filtering')
    parser.add_argument(
        '--jobs',
        type=int,
        metavar='N',
        help='Number of worker processes used to classify matches (default: number of CPUs)')
    parser.add_argument(
        '--settings',
        metavar='PATH',
        help='Path to the settings file. If not provided, uses PEWHERE_SETTINGS environment variable or '
             '~/.config/pewhere/settings.toml.')
    parser.add_argument(
        '--log-file',
        metavar='PATH',
        help='Path to log file. If not provided, uses logging.path from settings or standard error.')
    parser.add_argument(
        '-m', '--log-level',
        metavar='LEVEL',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults to logging.level from settings or '
             'WARNING.')
    parser.add_argument(
        '-i', '--ignore-errors',
        action='store_true',
        help='Always exit with status 0, even when nothing matched or an error occurred')
    return parser


def _install_interrupt_handler(cancel: CancellationToken):
    """Turn the first SIGINT into a cooperative cancellation; a second one interrupts."""
    def handler(signum, frame):
        if cancel.cancelled:
            raise KeyboardInterrupt
        logger.warning("Interrupt received, canceling search")
        cancel.cancel()

    return signal.signal(signal.SIGINT, handler)


def run(argv: list[str] | None = None, output=None) -> int:
    """Execute the command line and return the process exit status."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if output is None:
        output = sys.stdout

    def status(code: int) -> int:
        return EXIT_SUCCESS if args.ignore_errors else code

    try:
        settings = Settings(args.settings)
        settings.configure_logging(args.log_level, args.log_file)
    except (OSError, ValueError) as e:
        print(f"Error: failed to load settings: {e}", file=sys.stderr)
        return status(EXIT_ERROR)

    architecture = Architecture(args.filter)
    if architecture == Architecture.NONE:
        architecture = None

    logger.info("where command started")

    cancel = CancellationToken()
    previous_handler = _install_interrupt_handler(cancel)
    try:
        with Processor(args.jobs) as processor:
            results = Where(processor, settings).find(
                split_list(args.filenames),
                split_list(args.directories),
                split_list(args.skip_directories),
                architecture,
                cancel)
    except Canceled:
        logger.error("where command canceled")
        return status(EXIT_CANCELED)
    except Exception:
        logger.exception("where command encountered an error")
        return status(EXIT_ERROR)
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    if not results:
        logger.warning("where command found no files matching the specified criteria")
        return status(EXIT_NOT_FOUND)

    for match in results:
        print(os.path.join(match.directory, match.file_name), file=output)

    logger.info("where command completed")
    return EXIT_SUCCESS


@profile_main
def pewhere_main():
    sys.exit(run())


if __name__ == '__main__':
    pewhere_main()
