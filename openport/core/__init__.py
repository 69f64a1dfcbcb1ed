"""Run-state engine primitives (state, conditions, cooldowns, selection).

Kept free of FastAPI concerns so the controller, API routes and tests can all
drive it directly.
"""
