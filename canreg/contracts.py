"""Payloads exchanged with the canister registration API."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, model_validator

UNKNOWN_ERROR = "Unknown error"


class CanisterType(str, Enum):
    """Canister kinds a caller can register."""

    TOKEN_BACKEND = "token_backend"
    MINER = "miner"


class ApiCanisterType(str, Enum):
    """Canister kinds as named by the remote API."""

    TOKEN = "token"
    MINER = "miner"
    WALLET = "wallet"
    LEDGER = "ledger"


def to_api_type(canister_type: CanisterType | ApiCanisterType | str) -> str:
    """Map a local canister type tag to the one the API expects.

    Only ``token_backend`` is renamed (to ``token``), everything else passes through.
    """
    value = canister_type.value if isinstance(canister_type, Enum) else canister_type
    if value == CanisterType.TOKEN_BACKEND.value:
        return ApiCanisterType.TOKEN.value
    return value


class WireBody(BaseModel):
    """JSON body of ``POST /canisters``."""

    principal: str
    canister_id: str
    canister_type: Literal["token", "miner"]
    # reserved by the API, never populated by this client
    module_hash: None = None


class RegistrationRequest(BaseModel):
    principal: str
    canister_id: str
    canister_type: CanisterType

    def to_wire(self) -> WireBody:
        return WireBody(
            principal=self.principal,
            canister_id=self.canister_id,
            canister_type=to_api_type(self.canister_type),
        )


class RegistrationResult(BaseModel):
    success: bool
    data: Any = None
    error: str | None = None

    @model_validator(mode="after")
    def check_error_on_failure(self):
        if not self.success and self.error is None:
            raise ValueError("a failed result needs an error message")
        return self

    @classmethod
    def ok(cls, data: Any) -> "RegistrationResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "RegistrationResult":
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        """Return ``{"success", "data"}`` or ``{"success", "error"}``, never both."""
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}
