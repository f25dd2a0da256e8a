"""archflow - chat or image driven architecture diagrams."""

from .models import (
    Role,
    Message,
    NodeKind,
    Position,
    NodeData,
    FlowNode,
    FlowEdge,
    Graph,
    DesignArtifact,
)

from .config import (
    ProviderKind,
    ProviderCredential,
    ProviderSettings,
    get_model_config,
    print_config,
)

from .errors import (
    ArchflowError,
    ProviderError,
    MalformedArtifactError,
    SessionBusyError,
)

from .parsing import (
    extract_json_object,
    strip_code_fences,
    parse_graph,
    parse_design_artifact,
)

from .providers import (
    ProviderAdapter,
    OpenAIAdapter,
    GeminiAdapter,
    MockAdapter,
    create_adapter,
)

from .readiness import is_ready, ReadinessPolicy
from .session import ConversationSession, TurnResult
from .synthesizer import DesignSynthesizer
from .importer import DiagramImportPipeline

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Models
    "Role",
    "Message",
    "NodeKind",
    "Position",
    "NodeData",
    "FlowNode",
    "FlowEdge",
    "Graph",
    "DesignArtifact",
    # Config
    "ProviderKind",
    "ProviderCredential",
    "ProviderSettings",
    "get_model_config",
    "print_config",
    # Errors
    "ArchflowError",
    "ProviderError",
    "MalformedArtifactError",
    "SessionBusyError",
    # Parsing
    "extract_json_object",
    "strip_code_fences",
    "parse_graph",
    "parse_design_artifact",
    # Providers
    "ProviderAdapter",
    "OpenAIAdapter",
    "GeminiAdapter",
    "MockAdapter",
    "create_adapter",
    # Conversation
    "is_ready",
    "ReadinessPolicy",
    "ConversationSession",
    "TurnResult",
    # Generation and import
    "DesignSynthesizer",
    "DiagramImportPipeline",
]
