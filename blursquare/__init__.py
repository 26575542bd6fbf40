"""
blursquare: frame any image in a 1:1 square with a blurred copy of itself.
"""
__version__ = "1.0.0"
