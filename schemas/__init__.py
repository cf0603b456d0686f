from .payment import (
     PaymentConfirmation,
     PaymentInitiateRequest,
     LedgerEntryResponse,
     TransactionResponse,
     SettlementResponse,
)
from .fees import (
     PolicyUpdate,
     PolicyResponse,
     QuoteRequest,
     QuoteResponse,
     SplitLineResponse,
     LedgerSummaryResponse,
)
from .code_pool import (
     AssignNextRequest,
     BindCodeRequest,
     CodeResponse,
     PoolEntryResponse,
     PoolListResponse,
)

__all__ = [
     "PaymentConfirmation",
     "PaymentInitiateRequest",
     "LedgerEntryResponse",
     "TransactionResponse",
     "SettlementResponse",
     "PolicyUpdate",
     "PolicyResponse",
     "QuoteRequest",
     "QuoteResponse",
     "SplitLineResponse",
     "LedgerSummaryResponse",
     "AssignNextRequest",
     "BindCodeRequest",
     "CodeResponse",
     "PoolEntryResponse",
     "PoolListResponse",
]
