"""sqlswitch: start, stop and inspect a Cloud SQL instance over HTTP."""

__version__ = "0.1.0"
