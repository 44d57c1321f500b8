"""Building blocks for desktop status bars: commands, workers, config, IPC and more."""

__version__ = "0.1.0"