"""
Templates component - Port interfaces.
"""

from linkpage.ports.repo import TemplateRepoPort

__all__ = ["TemplateRepoPort"]
