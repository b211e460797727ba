"""Test suite for metasync.

Organized into three categories:

1. core/: Unit tests for core domain logic
   - Minimal dependencies, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Tests for adapter implementations
   - Runs against mocked HTTP transports
   - Validates request building and response parsing

3. fakes/: Port implementations for testing
   - In-memory implementations of SalesforceClientPort and ZendeskClientPort
   - Used by core unit tests
"""
