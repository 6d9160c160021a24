#!/usr/bin/env python3
"""
Yatzi Web — Flask + WebSocket server for browser-based play.

Each WebSocket connection gets its own GameCoordinator instance.
State is pushed to the client as JSON snapshots, once per animation step.
"""
import json
import logging
import threading
import time

logger = logging.getLogger(__name__)

from flask import Flask, render_template
from flask_sock import Sock

from game_coordinator import GameCoordinator
from frontend_adapter import FrontendAdapter
from game_engine import category_by_id
from settings import load_settings, save_settings

app = Flask(__name__)
sock = Sock(app)


@app.route("/")
def index():
    """Single page holding the setup form, dice and scoresheet."""
    return render_template("index.html")


@sock.route("/ws")
def websocket(ws):
    """WebSocket handler — one game per connection."""
    settings = load_settings()
    coordinator = GameCoordinator.restore_session(
        roll_steps=settings["roll_steps"],
        zero_counts_as_scored=settings["zero_counts_as_scored"],
    )
    adapter = FrontendAdapter(coordinator, roll_interval_ms=settings["roll_interval_ms"])
    lock = threading.Lock()
    running = True

    def tick_loop():
        """Background thread: advance the roll animation and push state."""
        nonlocal running
        while running:
            try:
                with lock:
                    adapter.update()
                    snapshot = adapter.get_game_snapshot()
                ws.send(json.dumps(snapshot))
            except Exception:
                logger.error("Tick loop error", exc_info=True)
                running = False
                break
            time.sleep(max(0, adapter.roll_interval_ms) / 1000)

    tick_thread = threading.Thread(target=tick_loop, daemon=True)
    tick_thread.start()

    try:
        while running:
            data = ws.receive()
            if data is None:
                break
            try:
                action = json.loads(data)
            except json.JSONDecodeError:
                logger.warning("Invalid JSON from client: %s", data)
                continue
            if not isinstance(action, dict):
                logger.warning("Ignoring non-object message: %s", data)
                continue

            with lock:
                _handle_action(adapter, action)
    except Exception:
        logger.error("WebSocket receive error", exc_info=True)
    finally:
        running = False


def _handle_action(adapter, action):
    """Dispatch a client action to the adapter."""
    cmd = action.get("action", "")

    if cmd == "start":
        names = action.get("names", [])
        if isinstance(names, list):
            adapter.do_start(names)

    elif cmd == "roll":
        adapter.do_roll()

    elif cmd == "hold":
        idx = action.get("die_index")
        if isinstance(idx, int) and 0 <= idx < 5:
            adapter.do_hold(idx)

    elif cmd == "score":
        cat = category_by_id(action.get("category", ""))
        player_index = action.get("player_index")
        score = action.get("score")
        if not isinstance(score, int) or isinstance(score, bool) or score < 0:
            score = None
        if cat is not None and isinstance(player_index, int):
            adapter.do_score(cat, player_index, score)

    elif cmd == "skip":
        adapter.do_skip()

    elif cmd == "reset":
        adapter.do_reset()

    elif cmd == "confirm":
        adapter.confirm()

    elif cmd == "dismiss":
        adapter.dismiss()

    else:
        logger.warning("Unknown action: %r", cmd)


def main():
    """Entry point for the web server."""
    import argparse
    parser = argparse.ArgumentParser(description="Yatzi Web Server")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=5000, help="Port (default: 5000)")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)
    # Write back the merged settings so a first run leaves an editable file
    save_settings(load_settings())
    print(f"Starting Yatzi web server at http://{args.host}:{args.port}")
    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
