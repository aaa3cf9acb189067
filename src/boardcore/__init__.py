"""boardcore: chess rules engine and turn coordinator for board widgets."""

__version__ = "0.1.0"
