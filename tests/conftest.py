"""
Shared fixtures for contextlog tests.
"""

import logging
import pytest
from unittest.mock import MagicMock


@pytest.fixture
def base_logger():
    """A base logger double with every level enabled."""
    base = MagicMock(spec=logging.Logger)
    base.isEnabledFor.return_value = True
    return base


@pytest.fixture
def notifier():
    """An agent notifier double."""
    from contextlog.agent import AgentNotifier
    return MagicMock(spec=AgentNotifier)


@pytest.fixture
def log_manager(base_logger, notifier):
    """A LogManager with some context data."""
    from contextlog.manager import LogManager
    return LogManager(
        {'account_id': 42, 'region': 'eu'},
        logger=base_logger,
        agent_notifier=notifier
    )
