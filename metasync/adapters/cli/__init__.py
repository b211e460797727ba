"""Command-line interface adapters.

Provides CLI commands for metadata operations:
- discover: Print every element of the connected org
- add: Create a custom object from a JSON definition
- update: Reconcile a custom object between two JSON definitions
- remove: Delete a custom object
"""
