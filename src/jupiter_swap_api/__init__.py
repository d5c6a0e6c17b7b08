from .client import SwapApiClient
from .config import DEFAULT_BASE_URL, ClientConfig, load_config
from .errors import ApiError, DecodeError, SwapApiError, TransportError
from .quote import PlatformFee, QuoteRequest, QuoteResponse, SwapMode
from .swap import (
    AccountMeta,
    DynamicSlippageReport,
    Instruction,
    SwapInstructionsResponse,
    SwapRequest,
    SwapResponse,
)
from .transaction_config import (
    ComputeUnitPrice,
    DynamicSlippageSettings,
    PrioritizationFee,
    PriorityLevel,
    TransactionConfig,
)

__all__ = [
    "AccountMeta",
    "ApiError",
    "ClientConfig",
    "ComputeUnitPrice",
    "DEFAULT_BASE_URL",
    "DecodeError",
    "DynamicSlippageReport",
    "DynamicSlippageSettings",
    "Instruction",
    "PlatformFee",
    "PrioritizationFee",
    "PriorityLevel",
    "QuoteRequest",
    "QuoteResponse",
    "SwapApiClient",
    "SwapApiError",
    "SwapInstructionsResponse",
    "SwapMode",
    "SwapRequest",
    "SwapResponse",
    "TransactionConfig",
    "TransportError",
    "load_config",
]
