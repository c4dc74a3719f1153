from provider_images.descriptor import ImageSource, ProviderDescriptor, ProviderText, ResolutionResult


def test_from_record_is_durable():
    descriptor = ProviderDescriptor.from_record({
        'id': '7d9f1c2e-0000-4000-8000-000000000001',
        'business_name': '  Rainbow Art Studio ',
        'specialties': ['art', ' craft', ''],
        'description': 'Weekend painting for ages 5-12',
        'website': 'https://rainbow-art.example/',
        'image_url': None,
    })
    assert descriptor.is_durable
    assert descriptor.display_name == 'Rainbow Art Studio'
    assert descriptor.specialties == ('art', 'craft')
    assert descriptor.website_url == 'https://rainbow-art.example/'
    assert descriptor.existing_image_url is None


def test_from_record_accepts_comma_separated_specialties():
    descriptor = ProviderDescriptor.from_record({'id': 'p-1', 'business_name': 'X',
                                                 'specialties': 'soccer, swim'})
    assert descriptor.specialties == ('soccer', 'swim')


def test_from_record_blank_strings_become_none():
    descriptor = ProviderDescriptor.from_record({'id': 'p-1', 'website': '  ', 'image_url': ''})
    assert descriptor.website_url is None
    assert descriptor.existing_image_url is None
    assert descriptor.display_name == ''


def test_from_search_result_is_ephemeral():
    descriptor = ProviderDescriptor.from_search_result(
        'places/ChIJ123', 'Lakeside Soccer Academy', ['soccer'],
        website_url='https://dead-domain.invalid')
    assert not descriptor.is_durable
    assert descriptor.identity == 'places/ChIJ123'
    assert descriptor.specialties == ('soccer',)


def test_text_assembly():
    text = ProviderText(display_name='Lakeside Soccer Academy',
                        specialties=('Soccer', 'Futsal'),
                        description='Ages 4-10')
    assert text.search_text == 'lakeside soccer academy soccer futsal ages 4-10'
    assert text.specialties_text == 'Soccer Futsal'
    assert text.variant_key == 'lakeside soccer academy_Soccer'


def test_text_without_specialties():
    text = ProviderDescriptor(identity='abc-123', is_durable=False).text
    assert text.search_text == '  '
    assert text.variant_key == '_default'


def test_icon_identity_prefers_name():
    assert ProviderDescriptor('abc-123', True, display_name='Blue Door').icon_identity == 'Blue Door'
    assert ProviderDescriptor('abc-123', True).icon_identity == 'abc-123'


def test_result_to_dict():
    result = ResolutionResult('https://x/og.png', ImageSource.WEBSITE_OG)
    assert result.to_dict() == {'image_url': 'https://x/og.png', 'source': 'website_og'}
