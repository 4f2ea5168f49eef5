"""
Association module for auto-populating required belongs-to relations.
"""

from exemplars.associations.resolver import AssociationResolver

__all__ = ["AssociationResolver"]
