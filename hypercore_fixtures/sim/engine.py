"""SimulatedCore ABC — the contract the fixture relies on from the ledger engine."""

from __future__ import annotations

from abc import ABC, abstractmethod


class SimulatedCore(ABC):
    """Handle to one simulated core instance, owned by a single test."""

    @property
    @abstractmethod
    def use_real_reads(self) -> bool:
        """Whether unmocked reads fall back to the bound network snapshot."""

    @abstractmethod
    def set_use_real_reads(self, enabled: bool) -> None:
        """Enable or disable the real-read fallback."""

    @abstractmethod
    def activate_account(self, address: str) -> None:
        """Mark an address as a known participant. Required before balance mutations."""

    @abstractmethod
    def is_activated(self, address: str) -> bool:
        """Return True if the address has been activated."""

    @abstractmethod
    def seed_spot_balance(self, address: str, token_index: int, amount: int) -> None:
        """Force the spot balance of an activated account for one token."""

    @abstractmethod
    def seed_margin_balance(self, address: str, amount: int) -> None:
        """Force the perp margin balance of an activated account."""

    @abstractmethod
    def spot_balance(self, address: str, token_index: int) -> int:
        """Read a spot balance through the normal read path."""

    @abstractmethod
    def margin_balance(self, address: str) -> int:
        """Read a perp margin balance through the normal read path."""

    @abstractmethod
    def reset(self) -> None:
        """Drop all local state at the end of a test."""
