"""LevelQuote — foam leveling pricing, invoices and estimates."""

__version__ = "1.0.0"
