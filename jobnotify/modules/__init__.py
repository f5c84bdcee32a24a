"""
JobNotify Modules
=================

Flask blueprint modules registered by the JobNotify extension.
"""

__all__ = ['auth', 'campaigns', 'dashboard', 'email', 'jobs', 'subscribers']
