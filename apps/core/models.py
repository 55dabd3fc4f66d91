# apps/core/models.py

from django.contrib.auth.models import AbstractUser
from django.db import models

# Largest value a BigAutoField id can hold
MAX_ID = 2 ** 63 - 1


class User(AbstractUser):
    """
    Custom user model

    Only the public profile (id, username, display name) is ever exposed
    to other board members.
    """

    display_name = models.CharField(max_length=100, blank=True)

    class Meta:
        db_table = 'users'

    def get_display_name(self):
        return self.display_name or self.username

    def to_public(self):
        """Public profile shown to collaborators"""
        return {
            'id': self.id,
            'username': self.username,
            'displayName': self.get_display_name(),
        }

    def __str__(self):
        return self.username


class Board(models.Model):
    """
    Kanban board - the tenant boundary

    The owner is fixed at creation time. Every board has exactly one
    BoardMember row with role=owner, created by a post_save signal.
    """

    name = models.CharField(max_length=200)
    owner = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='owned_boards'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'boards'
        ordering = ['-updated_at']

    def __str__(self):
        return self.name


class BoardMember(models.Model):
    """Membership of a user in a board"""

    ROLE_OWNER = 'owner'
    ROLE_MEMBER = 'member'
    ROLE_CHOICES = [
        (ROLE_OWNER, 'Owner'),
        (ROLE_MEMBER, 'Member'),
    ]

    board = models.ForeignKey(
        Board,
        on_delete=models.CASCADE,
        related_name='members'
    )
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='board_memberships'
    )
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_MEMBER)

    class Meta:
        db_table = 'board_members'
        unique_together = ['board', 'user']

    def __str__(self):
        return f"{self.user} @ {self.board} ({self.role})"


class Column(models.Model):
    """
    Ordered lane of a board

    Positions are dense and zero-based within a board. No unique
    constraint on (board, position): the sequencer shifts ranges with
    single UPDATE statements that would collide mid-statement.
    """

    board = models.ForeignKey(
        Board,
        on_delete=models.CASCADE,
        related_name='columns'
    )
    name = models.CharField(max_length=100)
    position = models.IntegerField(default=0)
    is_done = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'columns'
        ordering = ['position']
        indexes = [
            models.Index(fields=['board', 'position'], name='columns_board_position_idx'),
        ]

    def __str__(self):
        return f"{self.name} - {self.board.name}"


class Label(models.Model):
    """Board-scoped label"""

    board = models.ForeignKey(
        Board,
        on_delete=models.CASCADE,
        related_name='labels'
    )
    name = models.CharField(max_length=50)
    color = models.CharField(max_length=20)

    class Meta:
        db_table = 'labels'
        ordering = ['id']

    def __str__(self):
        return self.name


class CardQuerySet(models.QuerySet):

    def active(self):
        return self.filter(archived_at__isnull=True)

    def archived(self):
        return self.filter(archived_at__isnull=False)


class Card(models.Model):
    """
    Unit of work inside a column

    Active (non-archived) cards of a column occupy positions 0..n-1.
    Subtasks and comments are embedded ordered JSON lists.
    """

    PRIORITY_CHOICES = [
        ('low', 'Low'),
        ('medium', 'Medium'),
        ('high', 'High'),
    ]

    column = models.ForeignKey(
        Column,
        on_delete=models.CASCADE,
        related_name='cards'
    )
    title = models.CharField(max_length=200)
    description = models.TextField(null=True, blank=True)
    position = models.IntegerField(default=0)
    due_date = models.DateTimeField(null=True, blank=True)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, null=True, blank=True)
    color = models.CharField(max_length=20, null=True, blank=True)
    assignee = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_cards'
    )
    subtasks = models.JSONField(default=list, blank=True)
    comments = models.JSONField(default=list, blank=True)
    labels = models.ManyToManyField(
        Label,
        related_name='cards',
        blank=True,
        db_table='card_labels'
    )
    archived_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CardQuerySet.as_manager()

    class Meta:
        db_table = 'cards'
        ordering = ['position']
        indexes = [
            models.Index(fields=['column', 'position'], name='cards_column_position_idx'),
        ]

    @property
    def is_archived(self):
        return self.archived_at is not None

    def __str__(self):
        return self.title
