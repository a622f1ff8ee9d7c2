"""
Libyear Metrics

A tool for measuring how many libyears the dependencies of a multi-module build are behind.
"""

__version__ = "0.1.0"

from .cli import main

__all__ = ["main"]
