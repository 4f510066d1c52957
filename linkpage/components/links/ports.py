"""
Links component - Port interfaces.
"""

from linkpage.ports.repo import LinkRepoPort

__all__ = ["LinkRepoPort"]
