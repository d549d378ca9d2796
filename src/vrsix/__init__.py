"""Index of GA4GH VRS variant locations keyed by source file URI."""

__version__ = "0.1.0"
