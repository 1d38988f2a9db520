from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version('change-monitor')
except PackageNotFoundError:
    __version__ = 'unknown'

from .diff import DiffResult, compute_added_lines
from .engine import ChangeBatchingEngine
from .models import ChangeKind, FileFlushResult, FileStatus, FlushReport, PendingChange
from .watcher import ChangeMonitor

__all__ = [
    'ChangeBatchingEngine',
    'ChangeKind',
    'ChangeMonitor',
    'DiffResult',
    'FileFlushResult',
    'FileStatus',
    'FlushReport',
    'PendingChange',
    'compute_added_lines',
    '__version__',
]
