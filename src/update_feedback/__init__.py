"""Review installed updates and leave feedback on them."""

__version__ = "0.1.0"
