from .payments import router as payments_router
from .fees import router as fees_router
from .code_pool import router as code_pool_router
from .reports import router as reports_router

__all__ = [
     "payments_router",
     "fees_router",
     "code_pool_router",
     "reports_router",
]
