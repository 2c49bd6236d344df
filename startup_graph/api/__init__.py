"""
HTTP routes for the graph API.
"""
