# apps/board/urls.py

from django.urls import path, register_converter

from apps.core.converters import IdConverter

from . import views

register_converter(IdConverter, 'id')

app_name = 'board'

urlpatterns = [
    # === BOARDS ===
    path('api/boards/', views.board_list_view, name='board_list'),
    path('api/boards/<id:board_id>/', views.board_detail_view, name='board_detail'),
    path('api/boards/<id:board_id>/members/', views.member_add_view, name='member_add'),
    path('api/boards/<id:board_id>/members/<id:user_id>/', views.member_remove_view, name='member_remove'),

    # === COLUMNS ===
    path('api/boards/<id:board_id>/columns/', views.column_create_view, name='column_create'),
    path('api/boards/<id:board_id>/columns/reorder/', views.column_reorder_view, name='column_reorder'),
    path('api/columns/<id:column_id>/', views.column_detail_view, name='column_detail'),

    # === CARDS ===
    path('api/columns/<id:column_id>/cards/', views.card_create_view, name='card_create'),
    path('api/boards/<id:board_id>/archived-cards/', views.archived_cards_view, name='archived_cards'),
    path('api/cards/<id:card_id>/', views.card_detail_view, name='card_detail'),
    path('api/cards/<id:card_id>/move/', views.card_move_view, name='card_move'),
    path('api/cards/<id:card_id>/archive/', views.card_archive_view, name='card_archive'),
    path('api/cards/<id:card_id>/unarchive/', views.card_unarchive_view, name='card_unarchive'),

    # === LABELS ===
    path('api/boards/<id:board_id>/labels/', views.label_list_view, name='label_list'),
    path('api/labels/<id:label_id>/', views.label_detail_view, name='label_detail'),

    # === REALTIME ===
    path('ws/stats/', views.websocket_stats_view, name='websocket_stats'),
]
