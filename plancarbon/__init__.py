"""plancarbon - normalize terraform plans into compute resources for carbon estimation."""

__version__ = "0.1.0"
