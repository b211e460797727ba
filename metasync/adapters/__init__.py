"""External adapters for metasync.

This package contains all network dependencies and provides
implementations of the core port interfaces.

Adapter Organization:

- salesforce/: SOAP and REST client for the Salesforce metadata and data APIs
- zendesk/: REST client used when deploying ordered Zendesk resources
- cli/: Command-line interface commands
"""
