"""
Contextual logging with progress tracking and monitoring-agent reporting.
"""

from .agent import AgentNotifier, AgentNotifierFactory, NullAgentNotifier, StructlogAgentNotifier
from .config import LogManagerConfig
from .errors import ConfigError, ContextLogError, PrecociousProgressEvent, ProgressError
from .logging_config import configure_logging, reset_logging
from .manager import LogManager
from .progress import ProgressEvent, ProgressTracker

__all__ = [
    'LogManager',
    'LogManagerConfig',
    'configure_logging',
    'reset_logging',
    'AgentNotifier',
    'AgentNotifierFactory',
    'NullAgentNotifier',
    'StructlogAgentNotifier',
    'ProgressEvent',
    'ProgressTracker',
    'ContextLogError',
    'ConfigError',
    'ProgressError',
    'PrecociousProgressEvent',
]
__version__ = "0.1.0"
