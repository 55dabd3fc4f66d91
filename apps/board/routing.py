# apps/board/routing.py

from django.urls import re_path
from . import consumers

# One socket per client; the board is chosen with a "subscribe" frame
websocket_urlpatterns = [
    re_path(r'ws/$', consumers.BoardConsumer.as_asgi()),
]
