"""Canonical habit tag vocabulary.

Habit entries carry free-form tags (preset habits picked in the app plus
legacy categories produced by the journaling agent). Every tag is folded to
one of the canonical values below before it is counted or filtered.
"""
import re
import unicodedata
from typing import Optional

HABIT_TAGS = [
    {
        'value': 'movement',
        'label': 'Movimiento consciente',
        'aliases': ['movimiento', 'actividadfisica'],
    },
    {
        'value': 'nutrition',
        'label': 'Alimentación nutritiva',
        'aliases': ['alimentacion', 'nutricion'],
    },
    {
        'value': 'mindfulness',
        'label': 'Mindfulness o respiración',
        'aliases': ['mindfulness', 'respiracion'],
    },
    {
        'value': 'gratitude',
        'label': 'Gratitud o reflexión',
        'aliases': ['gratitud', 'reflexión'],
    },
    {
        'value': 'connection',
        'label': 'Conexion social',
        'aliases': ['social', 'compañías'],
    },
    {
        'value': 'rest',
        'label': 'Descanso reparador',
        'aliases': ['descanso'],
    },
    {
        'value': 'digital_break',
        'label': 'Pausa digital',
        'aliases': ['pausadigital', 'detoxdigital'],
    },
    {
        'value': 'creativity',
        'label': 'Actividad creativa o foco',
        'aliases': ['creatividad', 'trabajo', 'productividad'],
    },
    {
        'value': 'outdoors',
        'label': 'Contacto con la naturaleza',
        'aliases': ['naturaleza', 'exterior'],
    },
    {
        'value': 'self_compassion',
        'label': 'Compasión contigo',
        'aliases': ['autocuidado', 'compasión'],
    },
]

_NON_TAG_CHARS = re.compile(r'[^a-z0-9_]')
_WHITESPACE = re.compile(r'\s+')


def _normalize_base(value) -> str:
    if not isinstance(value, str):
        return ''
    decomposed = unicodedata.normalize('NFD', value.strip().lower())
    stripped = ''.join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_TAG_CHARS.sub('', _WHITESPACE.sub('', stripped))


HABIT_TAG_LABEL_LOOKUP = {tag['value']: tag['label'] for tag in HABIT_TAGS}

_HABIT_TAG_VALUE_MAP = {}
for _tag in HABIT_TAGS:
    _HABIT_TAG_VALUE_MAP[_normalize_base(_tag['value'])] = _tag['value']
    for _alias in _tag['aliases']:
        _HABIT_TAG_VALUE_MAP[_normalize_base(_alias)] = _tag['value']


def normalize_habit_tag(value) -> Optional[str]:
    """Map a raw tag or alias to its canonical value, or None when unknown."""
    if not isinstance(value, str):
        return None
    return _HABIT_TAG_VALUE_MAP.get(_normalize_base(value))


def habit_tag_label(value: str) -> str:
    return HABIT_TAG_LABEL_LOOKUP.get(value, value)
