from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .commands.controller import register as register_commands
from .commands.handler import ProfileSource
from .common.clock import Clock
from .context import build_context
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DatabaseConnection, DBConfig
from .notifications.push import PushChannel
from .runtime import EventLoopThread
from .scheduling.controller import register as register_hooks
from .settings import BotSettings
from .storage.mysql_store import MySQLStore
from .storage.store import DurableStore, InMemoryStore

logger = logging.getLogger(__name__)


def load_settings() -> BotSettings:
    load_dotenv(override=False)
    settings_module = get_settings_module()
    return BotSettings.from_module(importlib.import_module(settings_module))


def build_store(settings: BotSettings) -> DurableStore:
    if settings.store_backend != "mysql":
        return InMemoryStore()

    conn = DatabaseConnection.get_instance(DBConfig.from_dict(settings.db_config))
    if settings.auto_init_db:
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(conn, schema_path=schema_path)
        logger.info("schema ready (tables=%d)", len(list_tables(conn)))
    return MySQLStore(conn)


def create_app(
    settings: Optional[BotSettings] = None,
    *,
    store: Optional[DurableStore] = None,
    push: Optional[PushChannel] = None,
    profiles: Optional[ProfileSource] = None,
    clock: Optional[Clock] = None,
) -> Flask:
    settings = settings or load_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    app = Flask(__name__)
    context = build_context(
        settings,
        store=store if store is not None else build_store(settings),
        push=push,
        profiles=profiles,
        clock=clock,
    )

    runtime = EventLoopThread().start()
    atexit.register(runtime.stop)
    runtime.run(context.reconcile())

    app.extensions["attendance_bot"] = context
    app.extensions["attendance_bot.runtime"] = runtime

    @app.route("/", endpoint="index")
    def index():
        return "Attendance bot is running 🚀"

    @app.route("/health", endpoint="health")
    def health():
        return "OK"

    register_commands(app, context, runtime)
    register_hooks(app, context, runtime)

    return app
