"""Zendesk support API adapter."""
