#!/usr/bin/env python3
"""
Quick verification that the navigation store works end-to-end.
"""
import tempfile
from pathlib import Path

from pkg.navboard import board
from pkg.navboard.kv import SQLiteKV
from pkg.navboard.store import NavStore


def main():
    print("=" * 60)
    print("Navboard Store Verification")
    print("=" * 60)

    db_path = str(Path(tempfile.mkdtemp()) / "navboard_verify.db")

    print("\n[1/5] Creating SQLite store...")
    store = NavStore(SQLiteKV(db_path), seed_groups=["work"])
    print(f"✅ Store created at {db_path}")

    print("\n[2/5] First read seeds the documents...")
    cards = store.read_cards()
    print(f"✅ {len(cards)} seed cards, groups: {store.read_groups()}")

    print("\n[3/5] Adding a card...")
    cards, card = board.add_card(cards, {"title": "Site", "url": "https://example.com", "group": "work"})
    store.write_cards(cards)
    print(f"✅ Card {card['id']} color {card['color']}")

    print("\n[4/5] Reordering (new card first)...")
    ids = [card["id"]] + [c["id"] for c in cards if c["id"] != card["id"]]
    store.write_cards(board.reorder(store.read_cards(), ids))
    first = store.read_cards()[0]
    if first["id"] != card["id"]:
        print("❌ Reorder failed")
        return
    print(f"✅ First card is now {first['title']}")

    print("\n[5/5] Deleting group 'work' cascades to its cards...")
    groups, cards, removed = board.delete_group(store.read_groups(), store.read_cards(), "work")
    store.write_cards(cards)
    store.write_groups(groups)
    print(f"✅ Removed {removed} card(s); {len(store.read_cards())} remain")

    print("\n" + "=" * 60)
    print("✅ ALL CHECKS PASSED")
    print("=" * 60)


if __name__ == "__main__":
    main()
