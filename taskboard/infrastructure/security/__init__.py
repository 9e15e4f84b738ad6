"""Credential helpers for the in-memory auth backend."""
