"""Interactive session and flow animation."""
from .flow import FlowAnimator
from .session import BalanceSession, Evaluation

__all__ = ["FlowAnimator", "BalanceSession", "Evaluation"]
