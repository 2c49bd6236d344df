"""
Startup Ecosystem Graph.

Ingests startup and people data from rate-limited external sources, normalizes
it into one canonical dataset, and serves it as a queryable node/edge graph.
"""

__version__ = "1.0.0"
