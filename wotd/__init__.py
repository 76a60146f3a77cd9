"""Word of the day: selection, dictionary tooling and social posting."""

__version__ = "0.1.0"
