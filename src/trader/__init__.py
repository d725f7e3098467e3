"""
Trader orchestration package.

The bot entrypoint remains `main.py` at the repo root. Session setup, the
per-iteration trade pipeline and the rescheduling loop live under `src/trader/`
to keep entrypoints thin and testable.
"""
