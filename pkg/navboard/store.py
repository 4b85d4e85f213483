"""
Navigation document store.

Holds two JSON documents in a key-value backend: the card list and the group
list. Documents are seeded lazily on first read and only ever replaced as a
whole. There is no locking; the last writer wins.
"""
import copy
import json
import logging
from typing import List, Dict, Any, Optional

from .kv import KeyValueStore
from .schema import SEED_CARDS

logger = logging.getLogger(__name__)

CARDS_KEY = "nav_items"
GROUPS_KEY = "nav_groups"


class NavStore:
    """Gateway over the cards and groups documents."""

    def __init__(
        self,
        kv: KeyValueStore,
        cards_key: str = CARDS_KEY,
        groups_key: str = GROUPS_KEY,
        seed_cards: Optional[List[Dict[str, Any]]] = None,
        seed_groups: Optional[List[str]] = None,
    ):
        self.kv = kv
        self.cards_key = cards_key
        self.groups_key = groups_key
        self.seed_cards = seed_cards if seed_cards is not None else SEED_CARDS
        self.seed_groups = seed_groups if seed_groups is not None else []

    def _read_document(self, key: str, seed: list) -> list:
        raw = self.kv.get(key)
        if not raw:
            defaults = copy.deepcopy(seed)
            self._write_document(key, defaults)
            return defaults
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Corrupted document under {key!r}: {e}")
            return []
        if not isinstance(data, list):
            logger.warning(f"Document under {key!r} is not a list, ignoring")
            return []
        return data

    def _write_document(self, key: str, items: list) -> None:
        self.kv.put(key, json.dumps(items, ensure_ascii=False))

    def read_cards(self) -> List[Dict[str, Any]]:
        """Return the stored card list, seeding it if absent."""
        return self._read_document(self.cards_key, self.seed_cards)

    def read_groups(self) -> List[str]:
        """Return the stored group list, seeding it if absent."""
        return self._read_document(self.groups_key, self.seed_groups)

    def write_cards(self, cards: List[Dict[str, Any]]) -> None:
        self._write_document(self.cards_key, cards)

    def write_groups(self, groups: List[str]) -> None:
        self._write_document(self.groups_key, groups)

    def reset(self) -> None:
        """Overwrite both documents with the seed data."""
        self.write_cards(copy.deepcopy(self.seed_cards))
        self.write_groups(copy.deepcopy(self.seed_groups))
        logger.info("Store reset to seed data")
