"""CoinNavigator - Coin collection manager.

Keeps coins in named lists, each backed by its own SQLite table, with
validation, attribute search and safe moves between lists.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
