"""
ctplane - Control plane declarativo para commercetools.
"""

__version__ = "1.0.0"
