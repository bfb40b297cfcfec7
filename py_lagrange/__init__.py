"""
Procedural texture synthesis for the Lagrange planet editor.
"""

__version__ = "0.1.0"
