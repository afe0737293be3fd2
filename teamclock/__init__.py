"""Employee directory sync and time tracking dashboard backend."""

__version__ = '1.0.0'
