"""
postboard: a small social-content API (users, posts, comments, likes)
persisted to flat JSON collection files.
"""

__version__ = "0.1.0"
