"""Options controlling how the service assembles the swap transaction."""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class PriorityLevel(str, Enum):
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "veryHigh"


class ComputeUnitPrice(str, Enum):
    AUTO = "auto"


@dataclass(frozen=True)
class PrioritizationFee:
    kind: str
    amount: Optional[int] = None
    priority_level: Optional[PriorityLevel] = None
    global_: bool = False

    @classmethod
    def auto(cls) -> "PrioritizationFee":
        return cls(kind="auto")

    @classmethod
    def disabled(cls) -> "PrioritizationFee":
        return cls(kind="disabled")

    @classmethod
    def lamports(cls, lamports: int) -> "PrioritizationFee":
        return cls(kind="lamports", amount=lamports)

    @classmethod
    def auto_multiplier(cls, multiplier: int) -> "PrioritizationFee":
        return cls(kind="autoMultiplier", amount=multiplier)

    @classmethod
    def jito_tip_lamports(cls, lamports: int) -> "PrioritizationFee":
        return cls(kind="jitoTipLamports", amount=lamports)

    @classmethod
    def priority_level_with_max_lamports(
        cls, priority_level: PriorityLevel, max_lamports: int, global_: bool = False
    ) -> "PrioritizationFee":
        return cls(
            kind="priorityLevelWithMaxLamports",
            amount=max_lamports,
            priority_level=PriorityLevel(priority_level),
            global_=global_,
        )

    def to_json(self) -> Union[str, int, Dict[str, Any]]:
        if self.kind in ("auto", "disabled"):
            return self.kind
        if self.amount is None or self.amount < 0:
            raise ValueError(f"{self.kind} prioritization fee needs a non-negative amount")
        if self.kind == "lamports":
            return self.amount
        if self.kind in ("autoMultiplier", "jitoTipLamports"):
            return {self.kind: self.amount}
        if self.kind == "priorityLevelWithMaxLamports":
            if self.priority_level is None:
                raise ValueError("priorityLevelWithMaxLamports needs a priority level")
            return {
                self.kind: {
                    "priorityLevel": self.priority_level.value,
                    "maxLamports": self.amount,
                    "global": self.global_,
                }
            }
        raise ValueError(f"unknown prioritization fee kind: {self.kind}")


@dataclass(frozen=True)
class DynamicSlippageSettings:
    min_bps: Optional[int] = None
    max_bps: Optional[int] = None

    def to_json(self) -> Dict[str, int]:
        out: Dict[str, int] = {}
        if self.min_bps is not None:
            out["minBps"] = self.min_bps
        if self.max_bps is not None:
            out["maxBps"] = self.max_bps
        return out


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


@dataclass(frozen=True)
class TransactionConfig:
    """Swap transaction options; None leaves the choice to the service.

    Notable service-side defaults: wrap_and_unwrap_sol is true, everything
    boolean else is false, use_shared_accounts is decided per route.
    """

    wrap_and_unwrap_sol: Optional[bool] = None
    allow_optimized_wrapped_sol_token_account: Optional[bool] = None
    fee_account: Optional[str] = None
    destination_token_account: Optional[str] = None
    tracking_account: Optional[str] = None
    compute_unit_price_micro_lamports: Optional[Union[int, ComputeUnitPrice]] = None
    # Mutually exclusive with compute_unit_price_micro_lamports.
    prioritization_fee_lamports: Optional[PrioritizationFee] = None
    dynamic_compute_unit_limit: Optional[bool] = None
    as_legacy_transaction: Optional[bool] = None
    use_shared_accounts: Optional[bool] = None
    use_token_ledger: Optional[bool] = None
    skip_user_accounts_rpc_calls: Optional[bool] = None
    keyed_ui_accounts: Optional[List[Dict[str, Any]]] = None
    program_authority_id: Optional[int] = None
    dynamic_slippage: Optional[DynamicSlippageSettings] = None
    blockhash_slots_to_expiry: Optional[int] = None
    correct_last_valid_block_height: Optional[bool] = None

    def __post_init__(self) -> None:
        if self.compute_unit_price_micro_lamports is not None and self.prioritization_fee_lamports is not None:
            raise ValueError(
                "compute_unit_price_micro_lamports and prioritization_fee_lamports are mutually exclusive"
            )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, (PrioritizationFee, DynamicSlippageSettings)):
                value = value.to_json()
            elif isinstance(value, list):
                value = list(value)
            out[_camel(f.name)] = value
        return out
