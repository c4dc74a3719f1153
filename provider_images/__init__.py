"""
provider_images — Visual identity resolution for activity providers.

Pipeline steps:
  1. descriptor    — provider record → ProviderDescriptor + assembled text
  2. cache         — durable providers already resolved skip everything else
  3. website_meta  — og:image / twitter:image from the provider's website
  4. placeholder   — curated stock image picked by keyword (always succeeds)
  5. cache         — write the result back for saved providers
Side tools:
  icons   — deterministic (icon, colour) pair for card badges
  avatar  — deterministic emoji SVG avatar

Entry point: ImageResolver.from_config(...).resolve(descriptor)
Backfill:    python -m provider_images.run --limit 50
"""

from provider_images.config import ResolverConfig, load_config
from provider_images.descriptor import (
    ImageSource, ProviderDescriptor, ProviderText, ResolutionResult,
)
from provider_images.resolver import ImageResolver

__all__ = [
    'ImageResolver',
    'ImageSource',
    'ProviderDescriptor',
    'ProviderText',
    'ResolutionResult',
    'ResolverConfig',
    'load_config',
]
