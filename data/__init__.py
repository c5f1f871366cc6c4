"""Data access layer for the feedlot records app.

This module provides the record models, the column registry used by the
table screens and the Supabase table accessor.
"""
