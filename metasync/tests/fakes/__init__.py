"""Fake implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without network access:

- FakeSalesforceClientPort: Canned descriptions and recorded write calls
- FakeZendeskClientPort: Recorded PUT requests
"""

from .salesforce import FakeSalesforceClientPort
from .zendesk import FakeZendeskClientPort

__all__ = [
    "FakeSalesforceClientPort",
    "FakeZendeskClientPort",
]
