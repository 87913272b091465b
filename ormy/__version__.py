# noqa: D100
__version__ = "0.3.0"
