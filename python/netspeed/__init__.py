"""NetSpeed: record and serve internet speed-test results."""

__version__ = "1.0.0"
