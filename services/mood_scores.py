"""Valence/energy scores for the mood emojis offered by the app."""
from typing import Dict, Iterable

EMOJI_SCORE_TABLE = {
    'alegre': {'valence': 2, 'energy': 2},
    'agradecido': {'valence': 2, 'energy': 1},
    'tranquilo': {'valence': 1, 'energy': 0.5},
    'motivado': {'valence': 2, 'energy': 2},
    'energico': {'valence': 1.5, 'energy': 2},
    'estresado': {'valence': -1.5, 'energy': 1.5},
    'ansioso': {'valence': -2, 'energy': 1.5},
    'cansado': {'valence': -1, 'energy': 0.5},
    'triste': {'valence': -2, 'energy': 0.5},
    'enojado': {'valence': -2, 'energy': 1.5},
    'happy': {'valence': 2, 'energy': 1.5},
    'calm': {'valence': 1, 'energy': 0.5},
    'sad': {'valence': -2, 'energy': 0.5},
    'anxious': {'valence': -2, 'energy': 1.5},
    'angry': {'valence': -2, 'energy': 2},
    'neutral': {'valence': 0, 'energy': 1},
}

DEFAULT_MOOD_SCORE = {'valence': 0, 'energy': 0}


def get_emoji_score(emoji_name: str) -> Dict[str, float]:
    return EMOJI_SCORE_TABLE.get(emoji_name, DEFAULT_MOOD_SCORE)


def compute_mood_averages(emoji_names: Iterable[str] = ()) -> Dict[str, float]:
    """Average valence and energy of the selected emojis, rounded to 2 decimals."""
    names = list(emoji_names or [])
    if not names:
        return dict(DEFAULT_MOOD_SCORE)

    valence = sum(get_emoji_score(name)['valence'] for name in names)
    energy = sum(get_emoji_score(name)['energy'] for name in names)
    return {
        'valence': round(valence / len(names), 2),
        'energy': round(energy / len(names), 2),
    }


def mood_score_to_label(score) -> str:
    """Coarse label for a score: positivo, desafiante, estable or neutral."""
    if not score:
        return 'neutral'
    if score['valence'] >= 1.5:
        return 'positivo'
    if score['valence'] <= -1.5:
        return 'desafiante'
    return 'estable'
