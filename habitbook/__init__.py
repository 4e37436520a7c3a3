"""habitbook - a habit tracker and monthly goal journal for the terminal."""

__version__ = "0.1.0"
