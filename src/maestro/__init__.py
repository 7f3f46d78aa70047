"""maestro - route each chat-room message to the participant who should answer."""

from maestro._version import __version__
from maestro.config import MaestroConfig, load_env_file
from maestro.core.backlog import ConversationBacklog
from maestro.core.errors import MaestroError, TransportConnectError, TransportNotConnectedError
from maestro.core.framework import Maestro
from maestro.core.registry import ParticipantRegistry
from maestro.models import (
    ChatMessage,
    Participant,
    ResolvedTarget,
    SendInstruction,
    SendMode,
    TargetSource,
)
from maestro.orchestration import DispatchCoordinator, TargetResolver, normalize_answer
from maestro.providers.ai import AIProvider, MockAIProvider, ProviderError
from maestro.sources import (
    HTTPPresenceSource,
    MockPresenceSource,
    PresencePoller,
    PresenceSource,
)
from maestro.transport import ChatTransport, Credentials, MockTransport, WebSocketTransport

__all__ = [
    "AIProvider",
    "ChatMessage",
    "ChatTransport",
    "ConversationBacklog",
    "Credentials",
    "DispatchCoordinator",
    "HTTPPresenceSource",
    "Maestro",
    "MaestroConfig",
    "MaestroError",
    "MockAIProvider",
    "MockPresenceSource",
    "MockTransport",
    "Participant",
    "ParticipantRegistry",
    "PresencePoller",
    "PresenceSource",
    "ProviderError",
    "ResolvedTarget",
    "SendInstruction",
    "SendMode",
    "TargetResolver",
    "TargetSource",
    "TransportConnectError",
    "TransportNotConnectedError",
    "WebSocketTransport",
    "__version__",
    "load_env_file",
    "normalize_answer",
]
