# apps/board/__init__.py

"""
Board - kanban API and realtime updates

Features:
- JSON API for boards, members, columns, cards and labels
- Dense position ordering for columns and cards
- WebSocket fan-out of board events
- Optional signed outbound webhooks
"""
