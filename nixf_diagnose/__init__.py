"""nixf-diagnose: fancy diagnostic output for nixf-tidy."""

__version__ = "0.1.0"
