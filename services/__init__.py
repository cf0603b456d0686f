from .split_calculator import SplitLine, compute_splits
from .policy_store import Policy, PolicyStore
from .daily_fee_gate import DailyFeeGate
from .settlement_service import SettlementCoordinator, SettlementResult
from .code_pool_service import (
     CodePool,
     digital_root,
     format_code,
     parse_code,
)
from .report_service import ReportService
from .cache import TTLCache

__all__ = [
     "SplitLine",
     "compute_splits",
     "Policy",
     "PolicyStore",
     "DailyFeeGate",
     "SettlementCoordinator",
     "SettlementResult",
     "CodePool",
     "digital_root",
     "format_code",
     "parse_code",
     "ReportService",
     "TTLCache",
]
