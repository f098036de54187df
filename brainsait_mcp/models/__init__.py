from .definitions import PromptDefinition, ResourceDefinition, ToolDefinition
from .parameters import (
    DrugInteractionParams,
    ParameterValue,
    SymptomAnalysisParams,
    ToolParams,
    is_true_flag,
    marshal_parameters,
    marshal_prompt_arguments,
)
from .transport import (
    Cloud,
    Cloudflare,
    DeploymentEnvironment,
    Development,
    EdgeWorker,
    HttpEndpoint,
    LocalTransport,
    RaspberryPi,
    SecuredSocket,
    TransportKind,
    TransportRole,
)

__all__ = [
    "Cloud",
    "Cloudflare",
    "DeploymentEnvironment",
    "Development",
    "DrugInteractionParams",
    "EdgeWorker",
    "HttpEndpoint",
    "LocalTransport",
    "ParameterValue",
    "PromptDefinition",
    "RaspberryPi",
    "ResourceDefinition",
    "SecuredSocket",
    "SymptomAnalysisParams",
    "ToolDefinition",
    "ToolParams",
    "TransportKind",
    "TransportRole",
    "is_true_flag",
    "marshal_parameters",
    "marshal_prompt_arguments",
]
