"""Repository pattern implementation for data access."""

from .base_repository import (
    BaseTableRepository,
    RepositoryError,
    DataValidationError,
    DataNotFoundError,
)
from .supabase_table import SupabaseTable, TableState, error_message
from .field_mapper import TypeTransformers

__all__ = [
    # Base repository interface
    'BaseTableRepository',
    'RepositoryError',
    'DataValidationError',
    'DataNotFoundError',

    # Concrete implementation
    'SupabaseTable',
    'TableState',
    'error_message',

    'TypeTransformers',
]
