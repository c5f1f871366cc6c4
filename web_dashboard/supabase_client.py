#!/usr/bin/env python3
"""
Supabase client for the feedlot records app
Creates the REST client from SUPABASE_URL and the anon key
"""

import os
import logging
from typing import Optional

from dotenv import load_dotenv
from supabase import create_client, Client

from config.constants import HOME_CLOSEOUTS_TABLE

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when Supabase credentials are missing."""
    pass


class SupabaseClient:
    """Client for interacting with the Supabase database"""

    def __init__(self, url: Optional[str] = None, key: Optional[str] = None):
        """Initialize Supabase client

        Args:
            url: Project URL (defaults to SUPABASE_URL)
            key: Publishable/anon key (defaults to SUPABASE_PUBLISHABLE_KEY or SUPABASE_ANON_KEY)
        """
        self.url = url or os.getenv("SUPABASE_URL")
        self.key = key or os.getenv("SUPABASE_PUBLISHABLE_KEY") or os.getenv("SUPABASE_ANON_KEY")

        logger.debug(f"SUPABASE_URL exists: {bool(self.url)}")

        if not self.url or not self.key:
            logger.error(f"Missing environment variables - URL: {bool(self.url)}, KEY: {bool(self.key)}")
            raise ConfigurationError("SUPABASE_URL and SUPABASE_ANON_KEY (or SUPABASE_PUBLISHABLE_KEY) must be set")

        self.supabase: Client = create_client(self.url, self.key)

    def test_connection(self) -> bool:
        """Test database connection"""
        try:
            self.supabase.table(HOME_CLOSEOUTS_TABLE).select("id").limit(1).execute()
            logger.info("✅ Supabase connection successful")
            return True
        except Exception as e:
            logger.error(f"❌ Supabase connection failed: {e}")
            return False
