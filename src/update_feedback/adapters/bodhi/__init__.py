"""Update tracker adapter."""

from update_feedback.adapters.bodhi.client import BodhiClient

__all__ = ["BodhiClient"]
