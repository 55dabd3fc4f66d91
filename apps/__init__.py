# apps/__init__.py

"""
Kanban service - Django applications

- core: models, permissions, ordering, accounts
- board: boards/columns/cards/labels API and realtime fan-out
"""

__version__ = '1.0.0'
