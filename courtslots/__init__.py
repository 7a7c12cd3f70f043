"""
courtslots - Court availability and dynamic pricing engine.
"""

__version__ = "0.1.0"
