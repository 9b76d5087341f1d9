"""Local package manager adapter."""

from update_feedback.adapters.system.dnf import DnfInventory

__all__ = ["DnfInventory"]
