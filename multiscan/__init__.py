"""Run command-line antivirus engines and file identification tools, parse their output, and keep objects in local storage."""

__version__ = "0.1.0"