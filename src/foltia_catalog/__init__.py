"""foltia-catalog: data access for a foltia broadcast and recording catalog."""

__version__ = "0.1.0"
