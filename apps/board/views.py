# apps/board/views.py

"""
JSON endpoints for boards, columns, cards and labels

Views only parse and validate input; authorization, ordering and event
emission live in the services.
"""

from django.apps import apps
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_http_methods

from apps.core.api import api_view, clean_form, no_content, parse_json_body

from .forms import (
    BoardForm,
    CardForm,
    CardMoveForm,
    CardUnarchiveForm,
    CardUpdateForm,
    ColumnForm,
    ColumnReorderForm,
    ColumnUpdateForm,
    LabelForm,
    LabelUpdateForm,
    MemberAddForm,
)


def get_services():
    return apps.get_app_config('board').services


# === BOARDS ===

@require_http_methods(["GET", "POST"])
@api_view()
def board_list_view(request):
    """
    GET: boards the user belongs to
    POST: create a board owned by the user
    """
    services = get_services()
    if request.method == 'GET':
        return JsonResponse(services.boards.list_boards(request.user), safe=False)

    data = clean_form(BoardForm(parse_json_body(request)))
    return JsonResponse(services.boards.create_board(request.user, data), status=201)


@require_http_methods(["GET", "PUT", "DELETE"])
@api_view()
def board_detail_view(request, board_id):
    """
    GET: nested board view (404 for non-members)
    PUT: rename (owner only)
    DELETE: delete with everything in it (owner only)
    """
    services = get_services()
    if request.method == 'GET':
        return JsonResponse(services.boards.get_board(board_id, request.user))

    if request.method == 'PUT':
        data = clean_form(BoardForm(parse_json_body(request)))
        return JsonResponse(services.boards.update_board(board_id, request.user, data))

    services.boards.delete_board(board_id, request.user)
    return no_content()


@require_http_methods(["POST"])
@api_view()
def member_add_view(request, board_id):
    data = clean_form(MemberAddForm(parse_json_body(request)))
    member = get_services().boards.add_member(board_id, request.user, data['username'])
    return JsonResponse(member, status=201)


@require_http_methods(["DELETE"])
@api_view()
def member_remove_view(request, board_id, user_id):
    get_services().boards.remove_member(board_id, request.user, user_id)
    return no_content()


# === COLUMNS ===

@require_http_methods(["POST"])
@api_view()
def column_create_view(request, board_id):
    data = clean_form(ColumnForm(parse_json_body(request)))
    column = get_services().columns.create_column(board_id, request.user, data)
    return JsonResponse(column, status=201)


@require_http_methods(["PUT"])
@api_view()
def column_reorder_view(request, board_id):
    """Body: {"columnIds": [...]} listing every column exactly once"""
    data = clean_form(ColumnReorderForm(parse_json_body(request)))
    get_services().columns.reorder_columns(board_id, request.user, data['column_ids'])
    return JsonResponse({'success': True})


@require_http_methods(["PUT", "DELETE"])
@api_view()
def column_detail_view(request, column_id):
    services = get_services()
    if request.method == 'PUT':
        data = clean_form(ColumnUpdateForm(parse_json_body(request)), partial=True)
        return JsonResponse(services.columns.update_column(column_id, request.user, data))

    services.columns.delete_column(column_id, request.user)
    return no_content()


# === CARDS ===

@require_http_methods(["POST"])
@api_view()
def card_create_view(request, column_id):
    data = clean_form(CardForm(parse_json_body(request)))
    card = get_services().cards.create_card(column_id, request.user, data)
    return JsonResponse(card, status=201)


@require_http_methods(["PUT", "DELETE"])
@api_view()
def card_detail_view(request, card_id):
    services = get_services()
    if request.method == 'PUT':
        data = clean_form(CardUpdateForm(parse_json_body(request)), partial=True)
        return JsonResponse(services.cards.update_card(card_id, request.user, data))

    services.cards.delete_card(card_id, request.user)
    return no_content()


@require_http_methods(["PUT"])
@api_view()
def card_move_view(request, card_id):
    """
    Drag-and-drop target

    Body: {"columnId": int, "position": int >= 0}
    """
    data = clean_form(CardMoveForm(parse_json_body(request)))
    card = get_services().cards.move_card(card_id, request.user, data['column_id'], data['position'])
    return JsonResponse(card)


@require_http_methods(["POST"])
@api_view()
def card_archive_view(request, card_id):
    return JsonResponse(get_services().cards.archive_card(card_id, request.user))


@require_http_methods(["POST"])
@api_view()
def card_unarchive_view(request, card_id):
    data = clean_form(CardUnarchiveForm(parse_json_body(request)))
    card = get_services().cards.unarchive_card(card_id, request.user, data['column_id'])
    return JsonResponse(card)


@require_GET
@api_view()
def archived_cards_view(request, board_id):
    cards = get_services().cards.list_archived_cards(board_id, request.user)
    return JsonResponse(cards, safe=False)


# === LABELS ===

@require_http_methods(["GET", "POST"])
@api_view()
def label_list_view(request, board_id):
    services = get_services()
    if request.method == 'GET':
        return JsonResponse(services.labels.list_labels(board_id, request.user), safe=False)

    data = clean_form(LabelForm(parse_json_body(request)))
    return JsonResponse(services.labels.create_label(board_id, request.user, data), status=201)


@require_http_methods(["PUT", "DELETE"])
@api_view()
def label_detail_view(request, label_id):
    services = get_services()
    if request.method == 'PUT':
        data = clean_form(LabelUpdateForm(parse_json_body(request)), partial=True)
        return JsonResponse(services.labels.update_label(label_id, request.user, data))

    services.labels.delete_label(label_id, request.user)
    return no_content()


# === REALTIME ===

@require_GET
@api_view()
def websocket_stats_view(request):
    """Connection and subscriber counts of the fan-out registry"""
    return JsonResponse(apps.get_app_config('board').broadcaster.stats())
