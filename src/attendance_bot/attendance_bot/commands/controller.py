from __future__ import annotations

import logging
from datetime import datetime

from flask import Flask, jsonify, request

from ..context import BotContext
from ..runtime import EventLoopThread
from .model import InboundCommand

logger = logging.getLogger(__name__)


def register(app: Flask, context: BotContext, runtime: EventLoopThread) -> None:
    @app.route("/commands", methods=["POST"], endpoint="commands")
    def commands():
        payload = request.get_json(silent=True) or {}
        person_id = str(payload.get("person_id") or "").strip()
        text = str(payload.get("text") or "")
        if not person_id or not text.strip():
            return jsonify({"error": "person_id and text are required"}), 400

        timestamp = None
        if payload.get("timestamp"):
            try:
                timestamp = datetime.fromisoformat(str(payload["timestamp"]))
            except ValueError:
                return jsonify({"error": "timestamp must be ISO 8601"}), 400

        inbound = InboundCommand(
            person_id=person_id,
            text=text,
            timestamp=timestamp,
            display_name=(payload.get("display_name") or None),
        )
        try:
            reply = runtime.run(context.handler.handle(inbound))
        except Exception:
            logger.exception("command %r from %s failed", text, person_id)
            return jsonify({"error": "internal error"}), 500

        return jsonify(reply.to_dict())
