"""
HMAC Sensor Datasource

This package retrieves time-series observations from a sensor API that
authenticates every request with an HMAC signature, and reshapes the
sites -> datastreams -> observations hierarchy into flat series for charting.
"""

__version__ = "0.1.0"
__description__ = "HMAC-signed sensor API datasource"


def __getattr__(name):
    """Lazy import to avoid importing dependencies when not needed."""
    if name == "Datasource":
        from .datasource import Datasource
        return Datasource
    if name == "DatasourceApp":
        from .main import DatasourceApp
        return DatasourceApp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "Datasource",
    "DatasourceApp",
]
