"""
Card list operations.

Every function here is pure: it takes the current list(s) and returns new
ones, leaving the inputs untouched. The server reads a document, applies one
of these and writes the result back.

Cards are addressed either by ``id`` or, for id-less cards stored through a
bulk replace, by ``index`` (position in the list). ``id`` wins when both are
given.
"""
from typing import Any, Dict, List, Optional, Tuple

from .schema import NavCard

Card = Dict[str, Any]


class NavError(Exception):
    """Base error for board operations."""
    status = 500


class BadRequest(NavError):
    """Raised when a request is missing a required field."""
    status = 400


class NotFound(NavError):
    """Raised when the addressed card does not exist."""
    status = 404


def _card_id(card: Any) -> Any:
    """Id of a stored entry; entries that are not objects have none."""
    return card.get("id") if isinstance(card, dict) else None


def _resolve_index(cards: List[Card], payload: Dict[str, Any]) -> int:
    """Return the position addressed by payload, or -1 when absent."""
    card_id = payload.get("id")
    if card_id:
        for i, card in enumerate(cards):
            if _card_id(card) == card_id:
                return i
        return -1

    index = payload.get("index")
    if index is None:
        raise BadRequest("missing id")
    if isinstance(index, bool) or not isinstance(index, int):
        raise BadRequest("index must be an integer")
    if 0 <= index < len(cards):
        return index
    return -1


def find_card(cards: List[Card], card_id: str) -> Optional[Card]:
    for card in cards:
        if _card_id(card) == card_id:
            return card
    return None


# ── Mutations ───────────────────────────────────────────────────────────────

def add_card(cards: List[Card], payload: Dict[str, Any]) -> Tuple[List[Card], Card]:
    """Append a new card built from payload. Returns (new list, created card)."""
    card = NavCard.from_payload(payload).to_dict()
    return cards + [card], card


def update_card(cards: List[Card], payload: Dict[str, Any]) -> Tuple[List[Card], Card]:
    """
    Shallow-merge payload fields over the addressed card.

    Raises BadRequest if no identity is supplied, NotFound if nothing matches.
    """
    i = _resolve_index(cards, payload)
    if i == -1 or not isinstance(cards[i], dict):
        raise NotFound("not found")
    fields = {k: v for k, v in payload.items() if k != "index"}
    merged = {**cards[i], **fields}
    updated = list(cards)
    updated[i] = merged
    return updated, merged


def delete_card(cards: List[Card], payload: Dict[str, Any]) -> List[Card]:
    """
    Remove the addressed card.

    Deleting something that is already gone is not an error; the list comes
    back unchanged.
    """
    i = _resolve_index(cards, payload)
    if i == -1:
        return list(cards)
    return cards[:i] + cards[i + 1:]


def reorder(cards: List[Card], ids: List[Any]) -> List[Card]:
    """
    Rebuild the list in the order given by ids.

    Ids that match no card are dropped, as are cards whose id is not listed.
    A repeated id is only placed once.
    """
    by_id = {_card_id(card): card for card in cards if isinstance(_card_id(card), str)}
    seen = set()
    result = []
    for card_id in ids:
        if not isinstance(card_id, str) or card_id in seen:
            continue
        card = by_id.get(card_id)
        if card is not None:
            seen.add(card_id)
            result.append(card)
    return result


def insert(cards: List[Card], index: int, card: Card) -> List[Card]:
    """Insert card at index (clamped to the list bounds)."""
    index = max(0, min(index, len(cards)))
    return cards[:index] + [card] + cards[index:]


def remove(cards: List[Card], index: int) -> List[Card]:
    if not 0 <= index < len(cards):
        raise NotFound(f"no card at index {index}")
    return cards[:index] + cards[index + 1:]


def move(cards: List[Card], src: int, dst: int) -> List[Card]:
    """Move the card at src so that it ends up at position dst."""
    if not 0 <= src < len(cards):
        raise NotFound(f"no card at index {src}")
    card = cards[src]
    return insert(remove(cards, src), dst, card)


# ── Groups ──────────────────────────────────────────────────────────────────

def cards_in_group(cards: List[Card], name: str) -> List[Card]:
    return [c for c in cards if isinstance(c, dict) and c.get("group") == name]


def delete_group(
    groups: List[str], cards: List[Card], name: str
) -> Tuple[List[str], List[Card], int]:
    """
    Remove a group and every card that belongs to it.

    Returns (new groups, new cards, number of cards removed).
    """
    if not name:
        raise BadRequest("missing name")
    kept_groups = [g for g in groups if g != name]
    kept_cards = [c for c in cards if not (isinstance(c, dict) and c.get("group") == name)]
    return kept_groups, kept_cards, len(cards) - len(kept_cards)
