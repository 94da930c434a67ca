"""
Pipeline orchestration module for Orders in Council monitoring.
"""

from .pipeline import OrdersInCouncilPipeline

__all__ = ["OrdersInCouncilPipeline"]
