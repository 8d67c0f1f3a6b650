"""
Stampdesk: place image stamps on PDF pages and export the stamped copy.
"""
__version__ = "0.1.0"
