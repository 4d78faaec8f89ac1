from bdb import BdbQuit
from collections import defaultdict
import datetime
import functools
from pathlib import Path
import sys
import time
from typing import Any, Callable, Optional, Union

import click
from loguru import logger


LOG_FORMAT = ('<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | '
              '<level>{level: <8}</level> | '
              '<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - '
              '<level>{message}</level>')

# Terminal log level keyed by the number of -v flags.
_VERBOSITY_LEVELS = {
    0: 'WARNING',
    1: 'INFO',
}


def add_verbose_and_with_debugger(func: Callable) -> Callable:
    func = click.option(
        '-v', 'verbose',
        count=True,
        help='Configure logging verbosity.',
    )(func)
    func = click.option(
        '--pdb', 'with_debugger',
        is_flag=True,
        help='Drop into python debugger if application fails.',
    )(func)
    return func


def with_specification(specification_class):
    def _callback(ctx, param, value):
        return specification_class.from_path(value)
    return click.argument(
        'specification',
        type=click.Path(exists=True, dir_okay=False),
        callback=_callback
    )


with_output_root = click.option(
    '-o', '--output-root',
    type=click.Path(file_okay=False),
    help='Directory in which to make the run directory. Overrides the '
         'output root given in the specification.',
)


def configure_logging_to_terminal(verbose: int) -> None:
    """Replace any existing sinks with a single terminal sink."""
    logger.remove()
    level = _VERBOSITY_LEVELS.get(verbose, 'DEBUG')
    logger.add(sys.stderr, level=level, format=LOG_FORMAT, colorize=True)


def configure_logging_to_files(output_path: Union[str, Path]) -> None:
    """Mirror all logging into the run's log directory."""
    log_dir = Path(output_path) / 'logs'
    log_dir.mkdir(parents=True, exist_ok=True)
    logger.add(log_dir / 'main.log', level='DEBUG', format=LOG_FORMAT, colorize=False)
    logger.add(log_dir / 'error.log', level='WARNING', format=LOG_FORMAT,
               colorize=False, backtrace=True, diagnose=False)


def handle_exceptions(func: Callable, logger: Any, with_debugger: bool) -> Callable:
    """Drops a user into an interactive debugger if func raises an error."""

    @functools.wraps(func)
    def wrapped(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (BdbQuit, KeyboardInterrupt):
            raise
        except Exception as e:
            logger.exception("Uncaught exception {}".format(e))
            if with_debugger:
                import pdb
                import traceback
                traceback.print_exc()
                pdb.post_mortem()
            else:
                raise

    return wrapped


def get_output_root(cli_argument: Optional[str], specification_value: Optional[str]) -> Path:
    """Determine the output root hierarchically.

    CLI arguments override specification args.  Specification args override
    the current working directory.

    """
    version = _get_argument_hierarchically(cli_argument, specification_value, '.')
    return Path(version).resolve()


def make_run_directory(output_root: Union[str, Path]) -> Path:
    """Make a new dated run directory of the form YYYY_MM_DD.VV."""
    output_root = Path(output_root)
    output_root.mkdir(parents=True, exist_ok=True)
    today = datetime.date.today().strftime('%Y_%m_%d')
    existing = [p.name for p in output_root.glob(f'{today}.*') if p.is_dir()]
    versions = [int(name.split('.')[-1]) for name in existing if name.split('.')[-1].isdigit()]
    run_version = max(versions, default=0) + 1
    run_directory = output_root / f'{today}.{run_version:02d}'
    run_directory.mkdir()
    return run_directory


def _get_argument_hierarchically(cli_argument: Optional,
                                 specification_value: Optional,
                                 default: Any) -> Any:
    """Determine the argument to use hierarchically.

    Prefer cli args over values in a specification file over the default.
    """
    if cli_argument:
        output = cli_argument
    elif specification_value:
        output = specification_value
    else:
        output = default
    return output


class _TaskPerformanceLogger:

    def __init__(self):
        self.current_context = None
        self.current_context_start = None
        self.times = defaultdict(float)

    def _record_timing(self, context):
        if context is None:
            return
        if self.current_context is None:
            self.current_context = context
            self.current_context_start = time.time()
        else:
            self.times[self.current_context] += time.time() - self.current_context_start
            self.current_context = context
            self.current_context_start = time.time()

    def info(self, *args, context=None, **kwargs):
        self._record_timing(context)
        logger.opt(depth=1).info(*args, **kwargs)

    def debug(self, *args, context=None, **kwargs):
        self._record_timing(context)
        logger.opt(depth=1).debug(*args, **kwargs)

    def warning(self, *args, context=None, **kwargs):
        self._record_timing(context)
        logger.opt(depth=1).warning(*args, **kwargs)

    def report(self):
        if self.current_context is not None:
            self.times[self.current_context] += time.time() - self.current_context_start
        logger.info(
            "\nRuntime report\n" +
            "="*31 + "\n" +
            "\n".join([f'{context:<20}:{elapsed_time:>10.2f}' for context, elapsed_time in self.times.items()])
        )


task_performance_logger = _TaskPerformanceLogger()
