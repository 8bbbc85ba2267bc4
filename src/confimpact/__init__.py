"""confimpact - structural diff and risk analysis for configuration files."""

__version__ = "0.1.0"
