"""
bacmon - read-side query and export service for building-automation sensor readings
"""

__version__ = "0.3.0"
