"""Salesforce adapters.

- client: REST and SOAP metadata API client (httpx)
- soap: SOAP envelope building and response parsing
"""
