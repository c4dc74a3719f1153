"""
descriptor.py — Value types flowing through the image resolution pipeline.

  ProviderDescriptor — one provider record as the resolver sees it
  ProviderText       — the only place free text is assembled for matching
  ImageSource        — where a resolved image came from
  ResolutionResult   — what resolve() hands back to the caller
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ImageSource(str, Enum):
    EXISTING        = 'existing'
    WEBSITE_OG      = 'website_og'
    WEBSITE_TWITTER = 'website_twitter'
    PLACEHOLDER     = 'placeholder'
    NONE            = 'none'


@dataclass(frozen=True)
class ResolutionResult:
    image_url: Optional[str]
    source:    ImageSource

    def to_dict(self) -> dict:
        return {'image_url': self.image_url, 'source': self.source.value}


def _clean(value) -> str:
    if value is None:
        return ''
    return str(value).strip()


@dataclass(frozen=True)
class ProviderText:
    """
    Free text assembled from a provider record.

    search_text      — lower-cased "name specialties description", used by
                       the placeholder categorizer
    specialties_text — specialties joined with spaces, paired with the icon
                       identity by the icon assigner
    variant_key      — lower-cased "name_firstspecialty", picks one image
                       among several curated for the same category
    """
    display_name: str = ''
    specialties:  tuple = ()
    description:  str = ''

    @property
    def specialties_text(self) -> str:
        return ' '.join(self.specialties)

    @property
    def search_text(self) -> str:
        return f'{self.display_name} {self.specialties_text} {self.description}'.lower()

    @property
    def variant_key(self) -> str:
        first = self.specialties[0] if self.specialties else 'default'
        return f'{self.display_name.lower()}_{first}'


@dataclass(frozen=True)
class ProviderDescriptor:
    """
    One provider as handed to ImageResolver.resolve().

    is_durable is True for saved provider_profiles rows (stable UUID) and
    False for not-yet-saved search results; only durable descriptors are
    ever written to the resolution cache.
    """
    identity:           str
    is_durable:         bool
    display_name:       str = ''
    specialties:        tuple = field(default_factory=tuple)
    description:        Optional[str] = None
    website_url:        Optional[str] = None
    existing_image_url: Optional[str] = None

    @property
    def text(self) -> ProviderText:
        return ProviderText(
            display_name=_clean(self.display_name),
            specialties=tuple(_clean(s) for s in self.specialties if _clean(s)),
            description=_clean(self.description),
        )

    @property
    def icon_identity(self) -> str:
        """Name shown on the card, or the raw identity when the record has none."""
        return _clean(self.display_name) or _clean(self.identity)

    # ------------------------------------------------------------------ #
    # Constructors
    # ------------------------------------------------------------------ #

    @classmethod
    def from_record(cls, record: dict) -> 'ProviderDescriptor':
        """
        Build a durable descriptor from a provider_profiles row.

        Row keys used: id, business_name, specialties, description,
        website, image_url
        """
        specialties = record.get('specialties') or []
        if isinstance(specialties, str):
            specialties = specialties.split(',')
        return cls(
            identity=_clean(record.get('id')),
            is_durable=True,
            display_name=_clean(record.get('business_name') or record.get('name')),
            specialties=tuple(_clean(s) for s in specialties if _clean(s)),
            description=_clean(record.get('description')) or None,
            website_url=_clean(record.get('website')) or None,
            existing_image_url=_clean(record.get('image_url')) or None,
        )

    @classmethod
    def from_search_result(cls,
                           reference: str,
                           name: str,
                           specialties=(),
                           description: Optional[str] = None,
                           website_url: Optional[str] = None,
                           image_url: Optional[str] = None) -> 'ProviderDescriptor':
        """Build an ephemeral descriptor for an external, unsaved search hit."""
        return cls(
            identity=_clean(reference),
            is_durable=False,
            display_name=_clean(name),
            specialties=tuple(_clean(s) for s in specialties if _clean(s)),
            description=_clean(description) or None,
            website_url=_clean(website_url) or None,
            existing_image_url=_clean(image_url) or None,
        )
