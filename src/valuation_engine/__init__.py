from src.valuation_engine.bid_valuator import AutomatedBidValuator, evaluate_contribution
from src.valuation_engine.models import ValuationResult

__all__ = ["AutomatedBidValuator", "ValuationResult", "evaluate_contribution"]
