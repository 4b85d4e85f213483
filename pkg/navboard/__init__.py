# Navboard: personal navigation dashboard backed by a key-value store
#
# Components:
#   schema.py  - Card model, color palette, seed data
#   kv.py      - Key-value backends (SQLite, in-memory)
#   store.py   - Cards/groups document gateway
#   board.py   - Pure list operations (add, update, delete, reorder, move, group cascade)
#   search.py  - Search-engine redirect URLs
#   config.py  - YAML + environment configuration
