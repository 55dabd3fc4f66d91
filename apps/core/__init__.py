# apps/core/__init__.py

"""
Core - base of the kanban service

Contains:
- Models (User, Board, BoardMember, Column, Card, Label)
- Membership guard and typed errors
- Position sequencer for columns and cards
- Account endpoints and JSON API plumbing
"""
