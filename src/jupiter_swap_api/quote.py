"""Quote request encoding and the pass-through quote response."""

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional

MAX_SLIPPAGE_BPS = 10_000
MAX_PLATFORM_FEE_BPS = 255


class SwapMode(str, Enum):
    EXACT_IN = "ExactIn"
    EXACT_OUT = "ExactOut"


def _query_value(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        # An empty list means "no restriction", same as leaving it unset.
        return ",".join(str(item) for item in value) if value else None
    return str(value)


@dataclass(frozen=True)
class QuoteRequest:
    """Parameters for GET /quote.

    Every tunable defaults to None, meaning "not sent": the service then
    applies its own default, which is not always the same as sending the
    documented default value explicitly.
    """

    input_mint: str
    output_mint: str
    amount: int
    slippage_bps: Optional[int] = None
    swap_mode: Optional[SwapMode] = None
    platform_fee_bps: Optional[int] = None
    dexes: Optional[List[str]] = None
    excluded_dexes: Optional[List[str]] = None
    only_direct_routes: Optional[bool] = None
    restrict_intermediate_tokens: Optional[bool] = None
    as_legacy_transaction: Optional[bool] = None
    max_accounts: Optional[int] = None
    quote_type: Optional[str] = None
    extra_args: Optional[Dict[str, str]] = None

    def __post_init__(self) -> None:
        if not self.input_mint or not self.output_mint:
            raise ValueError("input_mint and output_mint are required")
        if isinstance(self.amount, bool) or not isinstance(self.amount, int) or self.amount <= 0:
            raise ValueError(f"amount must be a positive integer, got {self.amount!r}")
        if self.slippage_bps is not None and not 0 <= self.slippage_bps <= MAX_SLIPPAGE_BPS:
            raise ValueError(f"slippage_bps must be within 0..{MAX_SLIPPAGE_BPS}, got {self.slippage_bps}")
        if self.platform_fee_bps is not None and not 0 <= self.platform_fee_bps <= MAX_PLATFORM_FEE_BPS:
            raise ValueError(f"platform_fee_bps must be within 0..{MAX_PLATFORM_FEE_BPS}, got {self.platform_fee_bps}")
        if self.max_accounts is not None and self.max_accounts <= 0:
            raise ValueError("max_accounts must be positive")

    def to_query(self) -> Dict[str, str]:
        fields = {
            "inputMint": self.input_mint,
            "outputMint": self.output_mint,
            "amount": self.amount,
            "slippageBps": self.slippage_bps,
            "swapMode": self.swap_mode,
            "platformFeeBps": self.platform_fee_bps,
            "dexes": self.dexes,
            "excludedDexes": self.excluded_dexes,
            "onlyDirectRoutes": self.only_direct_routes,
            "restrictIntermediateTokens": self.restrict_intermediate_tokens,
            "asLegacyTransaction": self.as_legacy_transaction,
            "maxAccounts": self.max_accounts,
            "quoteType": self.quote_type,
        }
        query: Dict[str, str] = {}
        for key, value in fields.items():
            encoded = _query_value(value)
            if encoded is not None:
                query[key] = encoded
        if self.extra_args:
            query.update({str(k): str(v) for k, v in self.extra_args.items()})
        return query


@dataclass(frozen=True)
class PlatformFee:
    amount: int
    fee_bps: int


def _optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"expected an integer, got {value!r}")
    return int(value)


class QuoteResponse(Mapping[str, Any]):
    """A priced route exactly as the service returned it.

    The decoded object is kept verbatim so it can be posted back to /swap
    unchanged; the typed properties only read from it.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any]) -> None:
        if not isinstance(data, Mapping):
            raise TypeError("quote response must be a JSON object")
        object.__setattr__(self, "_data", copy.deepcopy(dict(data)))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QuoteResponse":
        return cls(data)

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._data)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("QuoteResponse is immutable")

    def __reduce__(self):
        # copy, deepcopy and pickle rebuild through __init__, bypassing __setattr__.
        return (QuoteResponse, (self._data,))

    def __getitem__(self, key: str) -> Any:
        return copy.deepcopy(self._data[key])

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, QuoteResponse):
            return self._data == other._data
        if isinstance(other, Mapping):
            return self._data == dict(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"QuoteResponse({self._data!r})"

    @property
    def input_mint(self) -> Optional[str]:
        return self._data.get("inputMint")

    @property
    def output_mint(self) -> Optional[str]:
        return self._data.get("outputMint")

    @property
    def in_amount(self) -> Optional[int]:
        # Amounts travel as decimal strings to survive u64 precision.
        return _optional_int(self._data.get("inAmount"))

    @property
    def out_amount(self) -> Optional[int]:
        return _optional_int(self._data.get("outAmount"))

    @property
    def other_amount_threshold(self) -> Optional[int]:
        return _optional_int(self._data.get("otherAmountThreshold"))

    @property
    def swap_mode(self) -> Optional[SwapMode]:
        mode = self._data.get("swapMode")
        return SwapMode(mode) if mode is not None else None

    @property
    def slippage_bps(self) -> Optional[int]:
        return _optional_int(self._data.get("slippageBps"))

    @property
    def price_impact_pct(self) -> Optional[str]:
        value = self._data.get("priceImpactPct")
        return str(value) if value is not None else None

    @property
    def route_plan(self) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._data.get("routePlan") or [])

    @property
    def platform_fee(self) -> Optional[PlatformFee]:
        fee = self._data.get("platformFee")
        if not fee:
            return None
        return PlatformFee(amount=int(fee["amount"]), fee_bps=int(fee["feeBps"]))

    @property
    def context_slot(self) -> int:
        return _optional_int(self._data.get("contextSlot")) or 0

    @property
    def time_taken(self) -> float:
        return float(self._data.get("timeTaken") or 0.0)
