"""Control utility for the Dawn Pro USB DAC."""

__version__ = "0.1.0"
