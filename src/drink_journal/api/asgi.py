"""ASGI entrypoint for the drink journal API."""

from drink_journal.api.app import create_app
from drink_journal.containers import build_container

app = create_app(build_container())
