"""os2cw - send OS metrics to Amazon CloudWatch."""

__version__ = "0.1.0"
