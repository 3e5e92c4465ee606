"""Progress and status reporting backends.

The CLI installs one reporter per run with :func:`set_reporter`; library code
reaches it through :func:`get_reporter`.
"""

from .base import (
    Reporter,
    TaskStatus,
    get_reporter,
    get_verbosity,
    section,
    set_reporter,
    set_verbosity,
    task,
)
from .jsonl import JsonLinesReporter
from .plain import PlainReporter
from .rich_reporter import RichReporter
from .silent import SilentReporter

__all__ = [
    "Reporter",
    "TaskStatus",
    "get_reporter",
    "set_reporter",
    "get_verbosity",
    "set_verbosity",
    "section",
    "task",
    "PlainReporter",
    "JsonLinesReporter",
    "RichReporter",
    "SilentReporter",
]
