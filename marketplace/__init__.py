"""
Tribal Marketplace API: REST backend for a marketplace of handcrafted tribal goods.
"""
__version__ = "1.0.0"
