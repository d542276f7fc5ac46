"""OpenDyDNS: self-hosted dynamic DNS.

The daemon keeps user accounts and their DNS aliases (host.domain → IP)
behind a small token-authenticated HTTP API. The client CLI talks to it.
"""

__version__ = "0.1.0"
