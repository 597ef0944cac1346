from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..context import BotContext
from ..runtime import EventLoopThread
from .hooks import Hook

logger = logging.getLogger(__name__)


def register(app: Flask, context: BotContext, runtime: EventLoopThread) -> None:
    @app.route("/hooks", methods=["GET"], endpoint="hooks_list")
    def hooks_list():
        return jsonify(
            [
                {"hook": e.hook.value, "cron": e.cron(), "label": e.label}
                for e in context.timetable.entries
            ]
        )

    @app.route("/hooks/tick", methods=["POST"], endpoint="hooks_tick")
    def hooks_tick():
        now = context.clock.now()
        ran = []
        for entry in context.timetable.due(now):
            try:
                report = runtime.run(context.triggers.run(entry.hook, label=entry.label))
                ran.append({"hook": entry.hook.value, **report.as_dict()})
            except Exception:
                logger.exception("hook %s failed", entry.hook.value)
                ran.append({"hook": entry.hook.value, "error": "failed"})
        return jsonify({"at": now.isoformat(), "ran": ran})

    @app.route("/hooks/<name>", methods=["POST"], endpoint="hooks_run")
    def hooks_run(name: str):
        try:
            hook = Hook(name)
        except ValueError:
            return jsonify({"error": f"unknown hook {name}"}), 404

        payload = request.get_json(silent=True) or {}
        try:
            report = runtime.run(context.triggers.run(hook, label=payload.get("label")))
        except Exception:
            logger.exception("hook %s failed", hook.value)
            return jsonify({"error": "internal error"}), 500
        return jsonify({"hook": hook.value, **report.as_dict()})
