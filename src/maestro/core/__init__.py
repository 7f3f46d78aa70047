"""Core state and errors.

The routing engine lives in :mod:`maestro.core.framework`. It is not
re-exported here because it depends on the presence sources, which in turn
depend on the registry in this package.
"""

from maestro.core.backlog import DEFAULT_MAX_BACKLOG, ConversationBacklog
from maestro.core.errors import MaestroError, TransportConnectError, TransportNotConnectedError
from maestro.core.registry import ParticipantRegistry

__all__ = [
    "DEFAULT_MAX_BACKLOG",
    "ConversationBacklog",
    "MaestroError",
    "ParticipantRegistry",
    "TransportConnectError",
    "TransportNotConnectedError",
]
