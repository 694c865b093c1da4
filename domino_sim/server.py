"""HTTP API server for the domino simulator and solver."""

from __future__ import annotations

import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any

from .engine import DominoEngine
from .state_codec import StateValidationError


def _optional_int(body: dict[str, Any], key: str) -> int | None:
    value = body.get(key)
    if value is not None and (not isinstance(value, int) or isinstance(value, bool)):
        raise StateValidationError(f"{key} must be an integer or null")
    return value


def _optional_bool(body: dict[str, Any], key: str, default: bool = False) -> bool:
    value = body.get(key, default)
    if not isinstance(value, bool):
        raise StateValidationError(f"{key} must be a boolean")
    return value


class DominoHTTPServer:
    def __init__(
        self,
        engine: DominoEngine,
        host: str = "127.0.0.1",
        port: int = 8000,
        mode: str = "headless",
    ):
        self.engine = engine
        self.mode = mode
        self._lock = threading.RLock()

        handler_cls = self._build_handler()
        self.httpd = ThreadingHTTPServer((host, port), handler_cls)
        self.host, self.port = self.httpd.server_address

    def _build_handler(self):
        parent = self

        class Handler(BaseHTTPRequestHandler):
            server_version = "DominoSim/1.0"

            def log_message(self, fmt: str, *args):
                return

            def _send_json(self, code: int, payload: dict[str, Any]):
                body = json.dumps(payload).encode("utf-8")
                self.send_response(code)
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            def _read_json(self) -> dict[str, Any]:
                length = int(self.headers.get("Content-Length", "0"))
                if length == 0:
                    return {}
                data = self.rfile.read(length)
                try:
                    obj = json.loads(data.decode("utf-8"))
                except json.JSONDecodeError as exc:
                    raise StateValidationError(f"Invalid JSON body: {exc}") from exc
                if not isinstance(obj, dict):
                    raise StateValidationError("JSON body must be an object")
                return obj

            def do_GET(self):
                with parent._lock:
                    if self.path == "/health":
                        self._send_json(
                            200,
                            {
                                "mode": parent.mode,
                                "state_size": parent.engine.catalog.state_size,
                                "ready": True,
                            },
                        )
                        return

                    if self.path == "/state":
                        self._send_json(200, parent.engine.state_payload())
                        return

                    if self.path == "/solved":
                        self._send_json(200, {"solved": parent.engine.is_solved()})
                        return

                    if self.path == "/moves":
                        self._send_json(200, {"moves": parent.engine.catalog.labels})
                        return

                self._send_json(404, {"error": "Not Found"})

            def do_POST(self):
                try:
                    body = self._read_json()
                    with parent._lock:
                        if self.path == "/state":
                            state = body.get("state")
                            if state is None:
                                raise StateValidationError("Missing required field: state")
                            parent.engine.set_state(state)
                            self._send_json(200, parent.engine.state_payload())
                            return

                        if self.path == "/reset":
                            state = body.get("state") if "state" in body else None
                            parent.engine.reset(state=state)
                            self._send_json(200, parent.engine.state_payload())
                            return

                        if self.path == "/scramble":
                            if "steps" not in body:
                                raise StateValidationError("Missing required field: steps")
                            seed = _optional_int(body, "seed")
                            state, moves = parent.engine.scramble(steps=body["steps"], seed=seed)
                            self._send_json(
                                200,
                                {
                                    "state": state,
                                    "moves": moves,
                                    "step_count": parent.engine.step_count,
                                    "scrambled": not parent.engine.is_solved(),
                                },
                            )
                            return

                        if self.path == "/step":
                            if "move" not in body:
                                raise StateValidationError("Missing required field: move")
                            move = body["move"]
                            state = parent.engine.step(move)
                            self._send_json(
                                200,
                                {
                                    "state": state,
                                    "move": move,
                                    "solved": parent.engine.is_solved(),
                                    "step_count": parent.engine.step_count,
                                },
                            )
                            return

                        if self.path == "/solve":
                            max_expansions = _optional_int(body, "max_expansions")
                            if max_expansions is not None and max_expansions < 0:
                                raise StateValidationError("max_expansions must be >= 0")
                            out = parent.engine.solve(
                                two_stage=_optional_bool(body, "two_stage"),
                                max_expansions=max_expansions,
                                apply=_optional_bool(body, "apply"),
                            )
                            out["state"] = parent.engine.get_state()
                            out["solved"] = parent.engine.is_solved()
                            self._send_json(200, out)
                            return

                except StateValidationError as exc:
                    self._send_json(400, {"error": str(exc)})
                    return

                self._send_json(404, {"error": "Not Found"})

        return Handler

    def serve_forever(self):
        self.httpd.serve_forever()

    def start_background(self, daemon: bool = True) -> threading.Thread:
        thread = threading.Thread(target=self.serve_forever, daemon=daemon)
        thread.start()
        return thread

    def shutdown(self):
        self.httpd.shutdown()
        self.httpd.server_close()
