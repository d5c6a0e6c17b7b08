"""Swap request payloads and decoding of /swap and /swap-instructions bodies."""

import base64
import binascii
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

from solders.instruction import AccountMeta as SoldersAccountMeta
from solders.instruction import Instruction as SoldersInstruction
from solders.pubkey import Pubkey
from solders.transaction import VersionedTransaction

from .quote import QuoteResponse
from .transaction_config import TransactionConfig


_INT_STRING = re.compile(r"-?[0-9]+")


class ShapeError(ValueError):
    """A response object is missing a field or carries the wrong type."""


def _require(data: Mapping[str, Any], key: str) -> Any:
    if key not in data or data[key] is None:
        raise ShapeError(f"missing required field {key!r}")
    return data[key]


def _as_int(value: Any, key: str) -> int:
    # Integers arrive either as JSON numbers or as decimal strings; floats never.
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and _INT_STRING.fullmatch(value):
        return int(value)
    raise ShapeError(f"field {key!r} must be an integer, got {value!r}")


def _as_bool(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ShapeError(f"field {key!r} must be a boolean, got {value!r}")
    return value


def _optional_int(data: Mapping[str, Any], key: str) -> Optional[int]:
    value = data.get(key)
    return None if value is None else _as_int(value, key)


def _b64decode(value: Any, key: str) -> bytes:
    if not isinstance(value, str):
        raise ShapeError(f"field {key!r} must be a base64 string")
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        raise ShapeError(f"field {key!r} is not valid base64") from None


def _optional_mapping(data: Mapping[str, Any], key: str) -> Optional[Dict[str, Any]]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ShapeError(f"field {key!r} must be an object")
    return dict(value)


@dataclass(frozen=True)
class SwapRequest:
    user_public_key: str
    quote_response: QuoteResponse
    config: TransactionConfig = field(default_factory=TransactionConfig)

    def __post_init__(self) -> None:
        if not self.user_public_key:
            raise ValueError("user_public_key is required")
        if not isinstance(self.quote_response, QuoteResponse):
            object.__setattr__(self, "quote_response", QuoteResponse(self.quote_response))

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "userPublicKey": self.user_public_key,
            "quoteResponse": self.quote_response.to_dict(),
        }
        payload.update(self.config.to_dict())
        return payload


@dataclass(frozen=True)
class DynamicSlippageReport:
    slippage_bps: int
    other_amount: Optional[int] = None
    # Signed: negative values mean the swap did better than quoted.
    simulated_incurred_slippage_bps: Optional[int] = None
    amplification_ratio: Optional[Decimal] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DynamicSlippageReport":
        ratio = data.get("amplificationRatio")
        try:
            amplification = Decimal(str(ratio)) if ratio is not None else None
        except InvalidOperation:
            raise ShapeError(f"amplificationRatio is not a decimal: {ratio!r}") from None
        return cls(
            slippage_bps=_as_int(_require(data, "slippageBps"), "slippageBps"),
            other_amount=_optional_int(data, "otherAmount"),
            simulated_incurred_slippage_bps=_optional_int(data, "simulatedIncurredSlippageBps"),
            amplification_ratio=amplification,
        )


def _dynamic_slippage_report(data: Mapping[str, Any]) -> Optional[DynamicSlippageReport]:
    report = _optional_mapping(data, "dynamicSlippageReport")
    return DynamicSlippageReport.from_dict(report) if report is not None else None


def _prioritization_fee_lamports(data: Mapping[str, Any]) -> int:
    # Some deployments spell it without the "it".
    for key in ("prioritizationFeeLamports", "priorizationFeeLamports"):
        if data.get(key) is not None:
            return _as_int(data[key], key)
    return 0


@dataclass(frozen=True)
class SwapResponse:
    swap_transaction: bytes
    last_valid_block_height: int
    prioritization_fee_lamports: int = 0
    compute_unit_limit: int = 0
    prioritization_type: Optional[Dict[str, Any]] = None
    dynamic_slippage_report: Optional[DynamicSlippageReport] = None
    simulation_error: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SwapResponse":
        return cls(
            swap_transaction=_b64decode(_require(data, "swapTransaction"), "swapTransaction"),
            last_valid_block_height=_as_int(_require(data, "lastValidBlockHeight"), "lastValidBlockHeight"),
            prioritization_fee_lamports=_prioritization_fee_lamports(data),
            compute_unit_limit=_optional_int(data, "computeUnitLimit") or 0,
            prioritization_type=_optional_mapping(data, "prioritizationType"),
            dynamic_slippage_report=_dynamic_slippage_report(data),
            simulation_error=_optional_mapping(data, "simulationError"),
        )

    def to_versioned_transaction(self) -> VersionedTransaction:
        """Deserialize the unsigned transaction for signing by the caller."""
        return VersionedTransaction.from_bytes(self.swap_transaction)


@dataclass(frozen=True)
class AccountMeta:
    pubkey: str
    is_signer: bool = False
    is_writable: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AccountMeta":
        if not isinstance(data, Mapping):
            raise ShapeError("account entry must be an object")
        pubkey = _require(data, "pubkey")
        if not isinstance(pubkey, str):
            raise ShapeError("account pubkey must be a string")
        return cls(
            pubkey=pubkey,
            is_signer=_as_bool(data, "isSigner"),
            is_writable=_as_bool(data, "isWritable"),
        )


@dataclass(frozen=True)
class Instruction:
    program_id: str
    accounts: List[AccountMeta]
    data: bytes

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Instruction":
        if not isinstance(data, Mapping):
            raise ShapeError("instruction must be an object")
        program_id = _require(data, "programId")
        if not isinstance(program_id, str):
            raise ShapeError("programId must be a string")
        accounts = data.get("accounts") or []
        if not isinstance(accounts, list):
            raise ShapeError("instruction accounts must be a list")
        raw = data.get("data")
        return cls(
            program_id=program_id,
            accounts=[AccountMeta.from_dict(account) for account in accounts],
            data=_b64decode(raw, "data") if raw is not None else b"",
        )

    def to_solders(self) -> SoldersInstruction:
        return SoldersInstruction(
            Pubkey.from_string(self.program_id),
            self.data,
            [
                SoldersAccountMeta(Pubkey.from_string(a.pubkey), a.is_signer, a.is_writable)
                for a in self.accounts
            ],
        )


def _optional_instruction(data: Mapping[str, Any], key: str) -> Optional[Instruction]:
    value = data.get(key)
    return Instruction.from_dict(value) if value is not None else None


def _instruction_list(data: Mapping[str, Any], key: str) -> List[Instruction]:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise ShapeError(f"field {key!r} must be a list")
    return [Instruction.from_dict(item) for item in value]


@dataclass(frozen=True)
class SwapInstructionsResponse:
    swap_instruction: Instruction
    token_ledger_instruction: Optional[Instruction] = None
    compute_budget_instructions: List[Instruction] = field(default_factory=list)
    setup_instructions: List[Instruction] = field(default_factory=list)
    cleanup_instruction: Optional[Instruction] = None
    # Currently only carries the Jito tip instruction when one is requested.
    other_instructions: List[Instruction] = field(default_factory=list)
    address_lookup_table_addresses: List[str] = field(default_factory=list)
    prioritization_fee_lamports: int = 0
    compute_unit_limit: int = 0
    prioritization_type: Optional[Dict[str, Any]] = None
    dynamic_slippage_report: Optional[DynamicSlippageReport] = None
    simulation_error: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SwapInstructionsResponse":
        lookup_tables = data.get("addressLookupTableAddresses") or []
        if not isinstance(lookup_tables, list) or not all(isinstance(a, str) for a in lookup_tables):
            raise ShapeError("addressLookupTableAddresses must be a list of strings")

        cleanup = _optional_instruction(data, "cleanupInstruction")
        if cleanup is None:
            # Older deployments return a list under the plural key.
            legacy = _instruction_list(data, "cleanupInstructions")
            cleanup = legacy[0] if legacy else None

        return cls(
            swap_instruction=Instruction.from_dict(_require(data, "swapInstruction")),
            token_ledger_instruction=_optional_instruction(data, "tokenLedgerInstruction"),
            compute_budget_instructions=_instruction_list(data, "computeBudgetInstructions"),
            setup_instructions=_instruction_list(data, "setupInstructions"),
            cleanup_instruction=cleanup,
            other_instructions=_instruction_list(data, "otherInstructions"),
            address_lookup_table_addresses=list(lookup_tables),
            prioritization_fee_lamports=_prioritization_fee_lamports(data),
            compute_unit_limit=_optional_int(data, "computeUnitLimit") or 0,
            prioritization_type=_optional_mapping(data, "prioritizationType"),
            dynamic_slippage_report=_dynamic_slippage_report(data),
            simulation_error=_optional_mapping(data, "simulationError"),
        )

    def instructions(self) -> List[Instruction]:
        """All instructions in transaction order."""
        ordered: List[Instruction] = list(self.compute_budget_instructions)
        ordered.extend(self.setup_instructions)
        if self.token_ledger_instruction is not None:
            ordered.append(self.token_ledger_instruction)
        ordered.append(self.swap_instruction)
        if self.cleanup_instruction is not None:
            ordered.append(self.cleanup_instruction)
        ordered.extend(self.other_instructions)
        return ordered
