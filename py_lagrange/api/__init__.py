"""
HTTP API for texture synthesis.
"""
