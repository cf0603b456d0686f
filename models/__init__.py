from .base import Base
from .fee_policy import FeePolicy
from .fare_transaction import FareTransaction, TransactionStatus
from .ledger_entry import LedgerEntry, LedgerEntryType
from .daily_fee_claim import DailyFeeClaim
from .code_pool import CodePoolEntry, CodeOwnerType

__all__ = [
     "Base",
     "FeePolicy",
     "FareTransaction",
     "TransactionStatus",
     "LedgerEntry",
     "LedgerEntryType",
     "DailyFeeClaim",
     "CodePoolEntry",
     "CodeOwnerType",
]
