# apps/core/signals.py

import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Board, BoardMember

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Board)
def create_owner_membership(sender, instance, created, **kwargs):
    """
    Inserts the single owner membership row of a new board

    Runs only on creation; the owner never changes afterwards.
    """
    if not created:
        return

    BoardMember.objects.get_or_create(
        board=instance,
        user_id=instance.owner_id,
        defaults={'role': BoardMember.ROLE_OWNER}
    )
    logger.debug(f"👑 Owner {instance.owner_id} registered on board {instance.id}")
