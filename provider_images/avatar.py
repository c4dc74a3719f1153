"""
avatar.py — Emoji SVG avatars for providers with no picture at all.

Renders a 100x100 SVG (soft background, one large emoji, up to two small
ones) and returns it as a data: URL. Emoji set and colours are chosen by
keyword and by string_hash(), so the avatar for a provider never changes.
"""

from urllib.parse import quote

from provider_images.icons import string_hash

# (theme, keywords, emojis); first theme with a keyword in the text wins
EMOJI_THEMES = (
    ('sports',
     ('sport', 'soccer', 'football', 'basketball', 'tennis', 'swim', 'run', 'bike', 'ski', 'surf', 'gym', 'fitness', 'athletic'),
     ('⚽', '🏀', '🏈', '⚾', '🎾', '🏐', '🏓', '🏸', '🏑', '🥍', '🏊‍♀️', '🏃‍♂️', '🚴‍♀️', '⛷️', '🏄‍♂️')),
    ('arts',
     ('art', 'craft', 'paint', 'draw', 'music', 'sing', 'dance', 'theater', 'drama', 'creative', 'design'),
     ('🎨', '🖌️', '✏️', '🖍️', '🎭', '🎪', '🎬', '📸', '🎵', '🎼', '🎹', '🎸', '🥁', '🎤', '🎺')),
    ('science',
     ('science', 'stem', 'tech', 'robot', 'code', 'program', 'engineer', 'math', 'chemistry', 'physics', 'biology'),
     ('🔬', '⚗️', '🧪', '🔭', '🌍', '🌟', '⚡', '🔋', '💡', '🧬', '🦠', '🌡️', '⚖️', '🧲', '🚀')),
    ('nature',
     ('nature', 'outdoor', 'garden', 'plant', 'forest', 'tree', 'environment', 'eco', 'wildlife', 'camping'),
     ('🌳', '🌿', '🌱', '🌺', '🦋', '🐛', '🐝', '🐞', '🦗', '🌻', '🍃', '🌲', '🌴', '🌵', '🍄')),
    ('cooking',
     ('cook', 'bake', 'chef', 'kitchen', 'food', 'culinary', 'recipe', 'nutrition'),
     ('👨‍🍳', '👩‍🍳', '🍳', '🥘', '🍰', '🧁', '🍪', '🥧', '🍕', '🥖', '🥞', '🧄', '🌶️', '🥄', '🍽️')),
    ('tech',
     ('computer', 'digital', 'coding', 'programming', 'robotics', 'technology', 'gaming'),
     ('💻', '🖥️', '📱', '⌨️', '🖱️', '🎮', '🕹️', '🤖', '⚙️', '🔧', '💾', '📡', '🌐', '💿', '📀')),
    ('reading',
     ('read', 'book', 'story', 'library', 'writing', 'literature', 'language'),
     ('📚', '📖', '📝', '✍️', '📄', '📰', '📑', '🗞️', '📜', '📋', '📌', '📍', '🔖', '📕', '📗')),
    ('dance',
     ('dance', 'ballet', 'hip hop', 'movement', 'choreography', 'rhythm'),
     ('💃', '🕺', '🩰', '👯‍♀️', '🎵', '🎶', '🎼', '🥁', '🎹', '🎸', '🎤', '🎺', '🎷', '🪘', '🔔')),
    ('water',
     ('swim', 'pool', 'water', 'aquatic', 'diving', 'surf', 'sailing'),
     ('🏊‍♀️', '🏊‍♂️', '🌊', '💧', '🐠', '🐟', '🐡', '🦈', '🐙', '🐚', '⛵', '🛥️', '🏄‍♀️', '🏄‍♂️', '🤽‍♀️')),
    ('animals',
     ('animal', 'pet', 'zoo', 'farm', 'wildlife', 'veterinary', 'dog', 'cat', 'horse'),
     ('🐶', '🐱', '🐭', '🐹', '🐰', '🦊', '🐻', '🐼', '🐨', '🐯', '🦁', '🐸', '🐵', '🦆', '🐥')),
)

DEFAULT_EMOJIS = ('🎈', '🎉', '🎊', '🌈', '⭐', '✨', '🎯', '🎁', '🏆', '🎪', '🎠', '🎡', '🎢', '🎳', '🎲')

BACKGROUND_COLORS = (
    '#FEF7ED', '#FDF2F8', '#F0F9FF', '#F0FDF4', '#FFFBEB',
    '#FAF5FF', '#F3E8FF', '#EFF6FF', '#ECFDF5', '#FEF3C7',
)

ACCENT_COLORS = (
    '#FB923C', '#F472B6', '#60A5FA', '#4ADE80', '#FBBF24',
    '#A78BFA', '#C084FC', '#3B82F6', '#10B981', '#F59E0B',
)


def pick_emojis(text: str, themes=EMOJI_THEMES, default=DEFAULT_EMOJIS):
    lowered = (text or '').lower()
    for _, keywords, emojis in themes:
        if any(k in lowered for k in keywords):
            return emojis
    return default


def render_avatar_svg(business_name: str, specialties=(), provider_id: str = '') -> str:
    specialties = [s for s in specialties or () if s]
    emojis = pick_emojis(f'{business_name or ""} {" ".join(specialties)}')
    h = string_hash(f'{business_name or ""}-{provider_id or ""}-{"".join(specialties)}')

    primary_index = h % len(emojis)
    secondary = []
    for i in (1, 2):
        index = (h + i * 17) % len(emojis)
        if index != primary_index:
            secondary.append(emojis[index])

    background = BACKGROUND_COLORS[h % len(BACKGROUND_COLORS)]
    accent = ACCENT_COLORS[(h + 7) % len(ACCENT_COLORS)]

    small = ''.join(
        f'<text x="{25 + i * 50}" y="{25 + (i % 2) * 50}" text-anchor="middle" '
        f'font-size="16" font-family="system-ui" opacity="0.6">{emoji}</text>'
        for i, emoji in enumerate(secondary)
    )
    return (
        '<svg width="100" height="100" viewBox="0 0 100 100" xmlns="http://www.w3.org/2000/svg">'
        f'<rect width="100" height="100" fill="{background}" rx="16"/>'
        f'<circle cx="50" cy="50" r="35" fill="{accent}" opacity="0.1"/>'
        f'<text x="50" y="60" text-anchor="middle" font-size="32" font-family="system-ui">{emojis[primary_index]}</text>'
        f'{small}'
        '</svg>'
    )


def avatar_data_url(business_name: str, specialties=(), provider_id: str = '') -> str:
    svg = render_avatar_svg(business_name, specialties, provider_id)
    return f'data:image/svg+xml;utf8,{quote(svg, safe="")}'
