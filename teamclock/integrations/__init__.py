"""Clients for the external APIs"""
from .clockify_client import ClockifyClient
from .supabase_rest import SupabaseClient

__all__ = ['ClockifyClient', 'SupabaseClient']
