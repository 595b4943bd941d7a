"""Offline stand-ins for the remote model, used when mock AI is enabled.

The answers are shaped like real model output (fenced JSON text) so they go
through the same parsing path.
"""
import json
import re
from typing import List, Optional

from shoplist.domain.types import Item


NUMBER_WORDS = {
    'un': 1.0, 'uno': 1.0, 'una': 1.0, 'one': 1.0, 'a': 1.0, 'an': 1.0,
    'dos': 2.0, 'two': 2.0,
    'tres': 3.0, 'three': 3.0,
    'cuatro': 4.0, 'four': 4.0,
    'cinco': 5.0, 'five': 5.0,
    'seis': 6.0, 'six': 6.0,
    'siete': 7.0, 'seven': 7.0,
    'ocho': 8.0, 'eight': 8.0,
    'nueve': 9.0, 'nine': 9.0,
    'diez': 10.0, 'ten': 10.0,
    'medio': 0.5, 'media': 0.5,
}

SMALL_WORDS = {'de', 'del', 'la', 'el', 'los', 'las', 'y', 'con', 'sin', 'of', 'and'}

_NUMBER = r'\d+(?:[.,]\d+)?'
_QUANTITY = rf'(?:{_NUMBER}|' + '|'.join(sorted(NUMBER_WORDS, key=len, reverse=True)) + ')'

SEGMENT_SPLIT = re.compile(r'\s*(?:,|;|\by\b|\band\b)\s*', re.IGNORECASE)
GRAMS_PATTERN = re.compile(
    rf'^(?P<grams>{_NUMBER})\s*(?:gramos|gramo|grs?|g)\s+de\s+(?P<product>.+?)'
    rf'(?:\s+a\s+(?P<price>{_NUMBER})(?:\s+pesos)?\s+(?:el|por)\s+kilo)?$',
    re.IGNORECASE
)
ITEM_PATTERN = re.compile(
    rf'^(?:(?P<quantity>{_QUANTITY})\s+)?(?P<product>.*?)\s*'
    rf'(?:\b(?:de|a|en|at|for)\s+\$?(?P<price>{_NUMBER})\s*(?:pesos|dollars)?)?$',
    re.IGNORECASE
)


def _to_number(text: str) -> float:
    text = text.lower()
    if text in NUMBER_WORDS:
        return NUMBER_WORDS[text]
    return float(text.replace(',', '.'))


def singularize(word: str) -> str:
    """Rough singular form of a Spanish or English noun."""
    lower = word.lower()
    if len(lower) > 4 and lower.endswith('es') and lower[-3] in 'lnrdzj':
        return word[:-2]
    if len(lower) > 3 and lower.endswith('s') and not lower.endswith('ss'):
        return word[:-1]
    return word


def _display_name(product: str) -> str:
    words = product.split()
    if not words:
        return ''
    words[0] = singularize(words[0])
    name = ' '.join(words)
    return name[0].upper() + name[1:]


def _fenced(value) -> str:
    return "```json\n" + json.dumps(value, ensure_ascii=False) + "\n```"


def extract_shopping_items(text: str) -> str:
    """Answer a shopping extraction request for a transcript."""
    results = []
    last_product: Optional[str] = None
    for segment in SEGMENT_SPLIT.split(text.strip()):
        segment = segment.strip().rstrip('.')
        if not segment:
            continue

        grams = GRAMS_PATTERN.match(segment)
        if grams:
            product = _display_name(grams.group('product'))
            price = grams.group('price')
            results.append({
                'product': product,
                'quantity': round(_to_number(grams.group('grams')) / 1000, 3),
                'price': _to_number(price) if price else 0.0,
            })
            last_product = product
            continue

        match = ITEM_PATTERN.match(segment)
        if not match:
            continue
        product = _display_name(match.group('product')) or last_product
        if not product:
            continue
        quantity = match.group('quantity')
        price = match.group('price')
        results.append({
            'product': product,
            'quantity': _to_number(quantity) if quantity else 1.0,
            'price': _to_number(price) if price else 0.0,
        })
        last_product = product
    return _fenced(results)


def extract_wishlist_items(text: str) -> str:
    """Answer a wishlist extraction request for a transcript."""
    results = []
    for segment in SEGMENT_SPLIT.split(text.strip()):
        segment = segment.strip().rstrip('.')
        if not segment:
            continue
        words = []
        for index, word in enumerate(segment.split()):
            if word.lower() in ('una', 'un', 'uno') and index == 0:
                continue
            if index > 0 and word.lower() in SMALL_WORDS:
                words.append(word.lower())
            else:
                words.append(word[0].upper() + word[1:])
        if words:
            results.append({'product': ' '.join(words)})
    return _fenced(results)


def normalize_product(name: str) -> str:
    """Lowercase singular words without leading quantities."""
    words = [w for w in re.split(r'\s+', name.lower().strip()) if w]
    while words and (re.fullmatch(_NUMBER, words[0]) or words[0] in NUMBER_WORDS):
        words.pop(0)
    return ' '.join(singularize(w) for w in words if w not in SMALL_WORDS)


def reconcile_wishlist(wishlist: List[Item], newly_added: List[Item]) -> str:
    """Answer a reconciliation request by matching normalized names."""
    added = {normalize_product(i.product) for i in newly_added}
    added.discard('')
    result = []
    for entry in wishlist:
        name = normalize_product(entry.product)
        matches = any(a == name or a in name or name in a for a in added) if name else False
        result.append({
            'id': entry.id,
            'product': entry.product,
            'visible': False if matches else entry.visible,
        })
    return _fenced(result)


def chat_reply(text: str) -> str:
    """Answer a chat message without calling a model."""
    return f"Mock mode is on, so no model saw: \"{text}\" 🙂"
