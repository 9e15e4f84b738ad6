"""Supabase integration: REST client, in-memory backend, capability probing, repositories."""

from taskboard.infrastructure.supabase._query import PostgrestError, QueryBuilder, QueryResult
from taskboard.infrastructure.supabase._rest_client import SupabaseRESTClient
from taskboard.infrastructure.supabase.capabilities import SchemaCapabilityProber
from taskboard.infrastructure.supabase.client import DatabaseClientFactory
from taskboard.infrastructure.supabase.memory import InMemoryDatabase, InMemorySupabaseClient
from taskboard.infrastructure.supabase.protocol import AuthClient, DatabaseClient
from taskboard.infrastructure.supabase.session import SessionAccessor

__all__ = [
    "AuthClient",
    "DatabaseClient",
    "DatabaseClientFactory",
    "InMemoryDatabase",
    "InMemorySupabaseClient",
    "PostgrestError",
    "QueryBuilder",
    "QueryResult",
    "SchemaCapabilityProber",
    "SessionAccessor",
    "SupabaseRESTClient",
]
