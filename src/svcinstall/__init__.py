"""svcinstall - register any command as an OS-native background service."""

__version__ = "1.0.0"
