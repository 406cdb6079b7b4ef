"""
MarketLens - marketplace product search and review analysis service
"""

__version__ = "0.3.0"
