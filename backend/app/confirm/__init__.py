"""Confirmation workflow for planning sessions."""

from .machine import ConfirmationService

__all__ = ["ConfirmationService"]
