# apps/core/permissions.py

from .exceptions import Forbidden, NotFound
from .models import Board, BoardMember


class BoardPermissions:
    """
    Membership guard for board-scoped mutations

    Rules:
    - rename/delete board and add/remove members require the owner
    - columns, cards and labels require any member
    - board reads answer "not found" to non-members
    """

    @staticmethod
    def is_member(board_id, user_id):
        """True when the user has any membership row for the board"""
        if not board_id or not user_id:
            return False
        return BoardMember.objects.filter(board_id=board_id, user_id=user_id).exists()

    @staticmethod
    def is_owner(board_id, user_id):
        """True when the user's membership row for the board has role=owner"""
        if not board_id or not user_id:
            return False
        return BoardMember.objects.filter(
            board_id=board_id,
            user_id=user_id,
            role=BoardMember.ROLE_OWNER
        ).exists()

    @staticmethod
    def require_member(board_id, user):
        if not BoardPermissions.is_member(board_id, user.id):
            raise Forbidden('Access denied', code='NOT_BOARD_MEMBER')

    @staticmethod
    def require_owner(board_id, user):
        if not BoardPermissions.is_owner(board_id, user.id):
            raise Forbidden('Only the owner can do this', code='NOT_BOARD_OWNER')

    @staticmethod
    def get_readable_board(board_id, user):
        """
        Returns the board when the user may read it

        Absent boards and boards the user is not a member of are
        indistinguishable to the caller.
        """
        board = Board.objects.filter(id=board_id).first()
        if board is None or not BoardPermissions.is_member(board.id, user.id):
            raise NotFound('Board not found', code='BOARD_NOT_FOUND')
        return board

    @staticmethod
    def get_owned_board(board_id, user):
        """
        Returns the board for an owner-only operation

        Non-members get NotFound, members without the owner role get
        Forbidden.
        """
        board = BoardPermissions.get_readable_board(board_id, user)
        BoardPermissions.require_owner(board.id, user)
        return board

    @staticmethod
    def get_writable_board(board_id, user):
        """
        Returns the board for a member-level mutation

        Absent boards raise NotFound, existing boards the user is not a
        member of raise Forbidden.
        """
        board = Board.objects.filter(id=board_id).first()
        if board is None:
            raise NotFound('Board not found', code='BOARD_NOT_FOUND')
        BoardPermissions.require_member(board.id, user)
        return board
