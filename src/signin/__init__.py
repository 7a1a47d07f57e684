"""Sign-in reconciliation service.

Maps externally verified identities (local passwords, LDAP, SAML, social
providers) onto local user accounts, provisions first-time users and ends
sessions according to how they were started.
"""

__version__ = "0.1.0"
