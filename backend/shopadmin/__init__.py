"""
Storefront Admin Settings API

Back-office service for the storefront's runtime settings:
- services/ - env file store, settings, event relays, mail
- routers/ - admin settings and tracking endpoints
- middleware/ - audit logging
- common/ - logging setup and exceptions
"""

__version__ = "1.0.0"
