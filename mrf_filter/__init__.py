"""Stream a price-transparency index and keep Anthem PPO / New York file locations."""

__version__ = "0.1.0"
