"""bulkblock: validated bulk blocking of user accounts."""

__version__ = "0.1.0"
