"""OrgPanel - multi-tenant account and organization administration"""

__version__ = "1.0.0"
