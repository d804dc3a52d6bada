"""Buyer repository adapters."""

from buyer_leads.adapters.outbound.buyer.in_memory_buyer_repository import InMemoryBuyerRepository
from buyer_leads.adapters.outbound.buyer.postgres_buyer_repository import PostgresBuyerRepository

__all__ = [
    "InMemoryBuyerRepository",
    "PostgresBuyerRepository",
]
