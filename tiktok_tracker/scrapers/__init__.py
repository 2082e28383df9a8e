"""
Scrapers package.

Scrapers are designed to be:
- one browser session per page visit, always closed
- fail-soft (one target failing should not kill the tick)
"""
