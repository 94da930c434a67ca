"""
Orders in Council Keyword Monitor

Watches the Orders in Council search portal for a fixed keyword list,
accumulates every matching order in a local knowledge store and
republishes the most recent ones as an RSS feed.
"""

__version__ = "1.0.0"
__author__ = "Orders in Council Monitor"
