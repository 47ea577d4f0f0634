import inspect
import time
from datetime import datetime, timezone

from rich import print as _print
from rich.markup import escape

# logType -> (opening symbol, closing symbol, rich style)
LOG_TYPES = {
    'SUCCESS': ('^^^', '^^^', 'green'),
    'FAILURE': ('###', '###', 'red bold'),
    'STATE': ('~~~', '~~~', 'cyan'),
    'INFO': ('---', '---', 'blue'),
    'HEADER': ('===', '===', 'magenta bold'),
    'EXCEPTION': ('!!!', '!!!', 'red bold'),
    'WARNING': ('(((', ')))', 'yellow'),
    'DEBUG': ('[[[', ']]]', 'white'),
    'PROGRESS': ('vvv', 'vvv', 'blue'),
    'COMPLETED': ('<<<', '<<<', 'green'),
}

FUNCTION_NAME_PADDING = 32


def _caller_name() -> str:
    """Name of the function that called Print."""
    stack = inspect.stack()
    for frame in stack[2:]:
        if frame.function != 'Print':
            return frame.function
    return '<module>'


def Print(logType: str, message: str) -> None:
    """
    Prints a log line: UTC timestamp, symbol-wrapped logType, calling function, message.

    Unknown log types are printed without symbols or style.
    """
    try:
        timestamp = datetime.fromtimestamp(time.time(), tz=timezone.utc).isoformat(timespec='microseconds')

        log_type = logType.upper()
        before_symbol, after_symbol, style = LOG_TYPES.get(log_type, ('', '', ''))
        formatted = f"{before_symbol} {log_type} {after_symbol}".strip()
        if style:
            formatted = f"[{style}]{formatted}[/{style}]"

        function_name = _caller_name().ljust(FUNCTION_NAME_PADDING)

        # markup in the message itself (e.g. "[0 0 595 842]") must not be parsed by rich
        _print(f"{timestamp} {formatted} {function_name}", escape(message))

    except Exception as e:
        print(f"Something went wrong when attempting to print.\nError: {e}")
