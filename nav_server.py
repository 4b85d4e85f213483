#!/usr/bin/env python3
"""
Navboard Server
---------------
Serves the navigation dashboard page and a JSON API over the cards and groups
documents kept in a key-value store.

Usage:
    python nav_server.py --config config.yaml
    NAV_ADMIN_TOKEN=s3cret python nav_server.py --memory

Access:
    http://localhost:8787

API:
    GET    /api/cards       → JSON array of cards            (alias: /api/list)
    GET    /api/groups      → JSON array of group names
    POST   /api/cards       → object: add a card (201)       (alias: /api/add)
                              array:  replace the whole card list
    PUT    /api/update      → { id | index, ...fields }: shallow merge
    DELETE /api/delete      → { id | index }
    POST   /api/reorder     → { ids: [...] }
    POST   /api/groups      → array: replace the group list
    DELETE /api/groups      → { name }: drop group and its cards
    POST   /api/reset       → restore seed data
    GET    /search          → 302 to the chosen search engine

Every route except the two list reads needs the admin token, passed as
?key=..., "Authorization: Bearer ..." or "X-API-Key: ...".
"""

import argparse
import hmac
import logging
import sys
from functools import wraps
from pathlib import Path
from urllib.parse import urlsplit

from flask import Blueprint, Flask, current_app, jsonify, redirect, request, Response

from pkg.navboard import board
from pkg.navboard.board import NavError, BadRequest
from pkg.navboard.config import NavConfig, ConfigError
from pkg.navboard.kv import MemoryKV, SQLiteKV
from pkg.navboard.search import build_search_url
from pkg.navboard.store import NavStore

UI_FILE = Path(__file__).resolve().parent / "pkg" / "navboard" / "nav_ui.html"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,PUT,DELETE,OPTIONS",
    "Access-Control-Allow-Headers": "content-type, authorization, x-api-key",
}

bp = Blueprint("navboard", __name__)


def _cfg() -> NavConfig:
    return current_app.config["NAV_CONFIG"]


def _store() -> NavStore:
    return current_app.config["NAV_STORE"]


# ── Auth ─────────────────────────────────────────────────────────────────────

def _provided_token() -> str:
    """Admin token from ?key=, a bearer header or X-API-Key, in that order."""
    token = request.args.get("key", "")
    if not token:
        auth = request.headers.get("Authorization", "")
        if auth.lower().startswith("bearer "):
            token = auth[7:]
    if not token:
        token = request.headers.get("X-API-Key", "")
    return token.strip()


def require_admin(f):
    """Decorator: reject requests whose token does not match the admin secret."""
    @wraps(f)
    def decorated(*args, **kwargs):
        secret = _cfg().admin_token
        secret = "" if secret is None else str(secret)
        if not secret:
            return jsonify({"error": "admin token not configured"}), 503
        provided = _provided_token()
        if not hmac.compare_digest(provided.encode("utf-8"), secret.encode("utf-8")):
            current_app.logger.warning(
                f"Rejected {request.method} {request.path} from {request.remote_addr}"
            )
            return jsonify({"error": "Unauthorized"}), 403
        return f(*args, **kwargs)
    return decorated


def _json_body():
    """Parse the request body as JSON regardless of content type. Raises on bad input."""
    return request.get_json(force=True)


def _json_object() -> dict:
    data = _json_body()
    if not isinstance(data, dict):
        raise BadRequest("JSON object required")
    return data


def _api_not_found():
    return jsonify({"error": "unknown endpoint"}), 404


# ── Read routes ──────────────────────────────────────────────────────────────

@bp.route("/api/cards", methods=["GET"])
@bp.route("/api/list", methods=["GET"])
def api_cards():
    try:
        return jsonify(_store().read_cards())
    except Exception as e:
        current_app.logger.error(f"read_cards failed: {e}")
        return jsonify({"error": str(e)}), 500


@bp.route("/api/groups", methods=["GET"])
def api_groups():
    try:
        return jsonify(_store().read_groups())
    except Exception as e:
        current_app.logger.error(f"read_groups failed: {e}")
        return jsonify({"error": str(e)}), 500


# ── Card mutations ───────────────────────────────────────────────────────────

@bp.route("/api/cards", methods=["POST"])
@require_admin
def api_cards_post():
    """Add one card (object body) or replace the whole list (array body)."""
    try:
        data = _json_body()
        store = _store()
        if isinstance(data, list):
            if not all(isinstance(c, dict) for c in data):
                raise BadRequest("cards array must hold objects")
            store.write_cards(data)
            current_app.logger.info(f"Replaced card list ({len(data)} cards)")
            return jsonify({"ok": True, "count": len(data)})
        if not isinstance(data, dict):
            raise BadRequest("card object or array required")
        cards, card = board.add_card(store.read_cards(), data)
        store.write_cards(cards)
        current_app.logger.info(f"Added card {card['id']} ({card['title']})")
        return jsonify(card), 201
    except NavError as e:
        return jsonify({"error": str(e)}), e.status
    except Exception as e:
        return jsonify({"error": str(e)}), 500


@bp.route("/api/add", methods=["POST"])
@require_admin
def api_add():
    try:
        data = _json_object()
        store = _store()
        cards, card = board.add_card(store.read_cards(), data)
        store.write_cards(cards)
        current_app.logger.info(f"Added card {card['id']} ({card['title']})")
        return jsonify(card), 201
    except NavError as e:
        return jsonify({"error": str(e)}), e.status
    except Exception as e:
        return jsonify({"error": str(e)}), 500


@bp.route("/api/update", methods=["PUT"])
@require_admin
def api_update():
    try:
        data = _json_object()
        store = _store()
        cards, card = board.update_card(store.read_cards(), data)
        store.write_cards(cards)
        return jsonify(card)
    except NavError as e:
        return jsonify({"error": str(e)}), e.status
    except Exception as e:
        return jsonify({"error": str(e)}), 500


@bp.route("/api/delete", methods=["DELETE"])
@require_admin
def api_delete():
    try:
        data = _json_object()
        store = _store()
        store.write_cards(board.delete_card(store.read_cards(), data))
        return jsonify({"ok": True})
    except NavError as e:
        return jsonify({"error": str(e)}), e.status
    except Exception as e:
        return jsonify({"error": str(e)}), 500


@bp.route("/api/reorder", methods=["POST"])
@require_admin
def api_reorder():
    try:
        data = _json_object()
        ids = data.get("ids")
        if not isinstance(ids, list):
            return jsonify({"error": "ids array required"}), 400
        store = _store()
        store.write_cards(board.reorder(store.read_cards(), ids))
        return jsonify({"ok": True})
    except NavError as e:
        return jsonify({"error": str(e)}), e.status
    except Exception as e:
        return jsonify({"error": str(e)}), 500


# ── Groups ───────────────────────────────────────────────────────────────────

@bp.route("/api/groups", methods=["POST"])
@require_admin
def api_groups_replace():
    try:
        data = _json_body()
        if not isinstance(data, list):
            return jsonify({"error": "groups array required"}), 400
        _store().write_groups(data)
        current_app.logger.info(f"Replaced group list ({len(data)} groups)")
        return jsonify({"ok": True, "count": len(data)})
    except Exception as e:
        return jsonify({"error": str(e)}), 500


@bp.route("/api/groups", methods=["DELETE"])
@require_admin
def api_groups_delete():
    """Delete a group together with every card that belongs to it."""
    try:
        data = _json_object()
        store = _store()
        groups, cards, removed = board.delete_group(
            store.read_groups(), store.read_cards(), data.get("name")
        )
        store.write_cards(cards)
        store.write_groups(groups)
        current_app.logger.info(f"Deleted group {data.get('name')!r} and {removed} cards")
        return jsonify({"ok": True, "removed_cards": removed})
    except NavError as e:
        return jsonify({"error": str(e)}), e.status
    except Exception as e:
        return jsonify({"error": str(e)}), 500


@bp.route("/api/reset", methods=["POST"])
@require_admin
def api_reset():
    try:
        _store().reset()
        return jsonify({"ok": True})
    except Exception as e:
        return jsonify({"error": str(e)}), 500


# ── Page, search, health ─────────────────────────────────────────────────────

@bp.route("/search")
def search():
    site = None
    if request.args.get("site") in ("1", "true", "on"):
        site = urlsplit(request.host_url).hostname
    try:
        url = build_search_url(
            request.args.get("q", ""),
            engine=request.args.get("engine", "google"),
            site=site,
        )
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    return redirect(url, code=302)


@bp.route("/health")
def health():
    return jsonify({"status": "ok", "store": _store().kv.describe()})


@bp.route("/", defaults={"path": ""})
@bp.route("/<path:path>")
def index(path):
    # Single page app: every non-API path gets the dashboard
    if path == "api" or path.startswith("api/"):
        return _api_not_found()
    if not UI_FILE.exists():
        return jsonify({"error": "nav_ui.html not found"}), 404
    return Response(UI_FILE.read_text(encoding="utf-8"), mimetype="text/html")


# ── App factory ──────────────────────────────────────────────────────────────

def build_store(config: NavConfig) -> NavStore:
    kv = MemoryKV() if config.use_memory else SQLiteKV(config.db_path)
    return NavStore(
        kv,
        cards_key=config.cards_key,
        groups_key=config.groups_key,
        seed_groups=config.seed_groups,
    )


def create_app(config: NavConfig = None, store: NavStore = None) -> Flask:
    """Build the Flask app. Config and store are injected; nothing is global."""
    config = config or NavConfig.load()
    app = Flask(__name__)
    app.config["NAV_CONFIG"] = config
    app.config["NAV_STORE"] = store or build_store(config)
    app.json.sort_keys = False
    app.register_blueprint(bp)

    @app.before_request
    def preflight():
        if request.method == "OPTIONS" and request.path.startswith("/api/"):
            return Response(status=204)

    @app.after_request
    def add_cors(resp):
        for header, value in CORS_HEADERS.items():
            resp.headers[header] = value
        return resp

    @app.errorhandler(404)
    @app.errorhandler(405)
    def not_found(e):
        return _api_not_found()

    return app


# ── Main ─────────────────────────────────────────────────────────────────────

def main(argv=None):
    parser = argparse.ArgumentParser(description="Navboard Server")
    parser.add_argument("--host", default=None,
                        help="Bind address (use 0.0.0.0 to expose on network)")
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument("--db", help="Path to navboard.db (overrides NAV_DB env var)")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument("--memory", action="store_true",
                        help="Keep data in memory only (lost on exit)")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [navboard] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    try:
        config = NavConfig.load(args.config)
    except ConfigError as e:
        logging.error(f"Config error: {e}")
        return 2
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    if args.db:
        config.db_path = str(Path(args.db).expanduser())
    if args.memory:
        config.use_memory = True

    app = create_app(config)
    if not config.admin_token:
        app.logger.warning("NAV_ADMIN_TOKEN not set: admin API is disabled")

    print(f"""
╔═══════════════════════════════════════╗
║  Navboard Server                      ║
╠═══════════════════════════════════════╣
║  URL:   http://{config.host}:{config.port:<19}║
║  Store: {app.config['NAV_STORE'].kv.describe()[:30]:<30}║
╚═══════════════════════════════════════╝
""")

    app.run(host=config.host, port=config.port, debug=False, threaded=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
