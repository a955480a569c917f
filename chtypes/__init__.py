"""Column types, values and binary column encoding for a columnar SQL database client."""

__version__ = "0.1.0"