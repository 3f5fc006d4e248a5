"""Accounting module."""

from .accounting_store import AccountingStore, IAccountingPersistence
from .pricing import MODEL_PRICING, TIER_TO_MODEL, ModelPricing, calculate_cost, model_for_tier

__all__ = [
    "AccountingStore",
    "IAccountingPersistence",
    "MODEL_PRICING",
    "ModelPricing",
    "TIER_TO_MODEL",
    "calculate_cost",
    "model_for_tier",
]
