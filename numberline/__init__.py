"""numberline: authoritative room server for the secret number line-up party game."""

__version__ = "0.1.0"
