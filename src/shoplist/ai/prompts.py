"""Instruction texts sent to the remote model."""
import json
from typing import List

from shoplist.domain.types import Item


SHOPPING_EXTRACTION_PROMPT = """Extract shopping items from the user's speech and return a JSON array of objects with properties: product (string), quantity (number), price (number).

Rules:
- quantity defaults to 1.0 when it is not said.
- price defaults to 0.0 when it is not said. price is the price of ONE unit.
- Write product in singular with the first letter capitalized.
- When the quantity is given in grams and the price per kilo, convert the quantity to kilograms (divide by 1000) and keep the price per kilo.
- "uno", "una" and "un" mean 1; "medio" means 0.5.
- When several prices are said for the same product, return one object per price.

Examples:
"una servilleta" → [{"product":"Servilleta","quantity":1.0,"price":0.0}]
"3 bolsas de leche a 28 pesos" → [{"product":"Bolsa de leche","quantity":3.0,"price":28.0}]
"2 desodorantes de 45 pesos y uno de 25 pesos" → [{"product":"Desodorante","quantity":2.0,"price":45.0},{"product":"Desodorante","quantity":1.0,"price":25.0}]
"323 gramos de tomate a 80 el kilo" → [{"product":"Tomate","quantity":0.323,"price":80.0}]
"Tomates" → [{"product":"Tomate","quantity":1.0,"price":0.0}]

Output:
Return only a JSON array or an empty array ([]) for random text."""


WISHLIST_EXTRACTION_PROMPT = """Extract shopping items from text and return a JSON array of objects with properties: product (string).

Examples:
"una servilleta" → [{"product":"Servilleta"}]
"2 desodorantes" → [{"product":"2 Desodorantes"}]
"3 bolsas de leche" → [{"product":"3 Bolsas de Leche"}]
"Tomates" → [{"product":"Tomates"}]

Output:
Return only a JSON array or an empty array ([]) for random text."""


RECONCILIATION_PROMPT = """You keep a WISHLIST in sync with a shopping list.

Return the WISHLIST JSON array exactly as given, with the same length, the same order and the same fields.
The only change allowed: set "visible" to false on every wishlist entry that is semantically the same product as one of the NEWLY ADDED shopping items (ignore quantities, plural forms, brands and capitalization).
Do not change ids. Do not add or remove entries. Do not set "visible" to true.

WISHLIST:
{wishlist}

NEWLY ADDED:
{newly_added}

Return only the JSON array."""


CHAT_SYSTEM_INSTRUCTION = "You are a helpful assistant that always responds at the end with a smiling emoji."


def build_reconciliation_prompt(wishlist: List[Item], newly_added: List[Item]) -> str:
    """Fill the reconciliation prompt with both lists."""
    wishlist_json = json.dumps(
        [{"id": i.id, "product": i.product, "visible": i.visible} for i in wishlist],
        ensure_ascii=False
    )
    added_json = json.dumps(
        [{"product": i.product, "quantity": i.quantity} for i in newly_added],
        ensure_ascii=False
    )
    return RECONCILIATION_PROMPT.format(wishlist=wishlist_json, newly_added=added_json)
