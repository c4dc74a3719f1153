"""
Supabase provider-profile store.

The image resolver writes exactly one column, image_url, on the
provider_profiles table, and reads provider rows that have none yet. Everything else about a provider is owned by the
web app; this module never inserts or deletes rows.
"""

import os
import logging
from typing import Dict, List, Optional

from supabase import create_client, Client
from tenacity import retry, stop_after_attempt, wait_exponential

log = logging.getLogger(__name__)

PROVIDER_COLUMNS = 'id, business_name, specialties, description, website, image_url'


class SupabaseProviderStore:
    """
    Thin wrapper around the provider_profiles table.

    Args:
        client: supabase Client (see from_env() for the usual construction)
        table:  table holding provider profiles
    """

    def __init__(self, client: Client, table: str = 'provider_profiles'):
        self.client = client
        self.table = table

    @classmethod
    def from_env(cls, table: str = 'provider_profiles') -> 'SupabaseProviderStore':
        """
        Connect using SUPABASE_URL / SUPABASE_KEY.

        Raises:
            ValueError: If either variable is missing
        """
        url = os.getenv('SUPABASE_URL')
        key = os.getenv('SUPABASE_KEY')
        if not url or not key:
            raise ValueError(
                '❌ SUPABASE_URL and SUPABASE_KEY environment variables not set'
            )
        return cls(create_client(url, key), table=table)

    def schema_sql(self) -> str:
        """SQL to run once in the Supabase SQL editor."""
        return f"""
-- Resolved provider images (one per profile, no expiry)
ALTER TABLE {self.table} ADD COLUMN IF NOT EXISTS image_url TEXT;
CREATE INDEX IF NOT EXISTS idx_{self.table}_missing_image
    ON {self.table}(id) WHERE image_url IS NULL;
"""

    @retry(stop=stop_after_attempt(3),
           wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
           reraise=True)
    def update_image(self, provider_id: str, image_url: str):
        """Overwrite image_url for one provider. Retried on failure."""
        self.client.table(self.table).update(
            {'image_url': image_url}
        ).eq('id', provider_id).execute()
        log.debug(f'Stored image for provider {provider_id}')

    def load_providers_missing_images(self, limit: Optional[int] = None) -> List[Dict]:
        """Return provider rows with no image_url yet, oldest first."""
        query = (
            self.client.table(self.table)
            .select(PROVIDER_COLUMNS)
            .is_('image_url', 'null')
            .order('created_at')
        )
        if limit:
            query = query.limit(limit)
        result = query.execute()
        rows = result.data or []
        log.info(f'Loaded {len(rows)} providers without an image')
        return rows
