"""
Persistence adapters.

``json_storage`` owns the on-disk collection files; ``users`` and ``posts``
wrap one collection each. Routers depend on these repositories rather than
touching the JSON files.
"""

from postboard.repositories.json_storage import DocumentStore
from postboard.repositories.posts import PostRepository
from postboard.repositories.users import UserRepository

__all__ = ["DocumentStore", "PostRepository", "UserRepository"]
