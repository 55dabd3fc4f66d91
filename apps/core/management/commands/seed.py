# apps/core/management/commands/seed.py

from django.apps import apps
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from apps.core.models import Board, User

DEMO_COLUMNS = [
    ('To Do', False),
    ('In Progress', False),
    ('Review', False),
    ('Done', True),
]

DEMO_LABELS = [
    ('Bug', '#EF4444'),
    ('Feature', '#3B82F6'),
    ('Design', '#A855F7'),
    ('Backend', '#10B981'),
]

DEMO_CARDS = [
    # (column index, title, priority, label names)
    (0, 'Design login page', 'medium', ['Design']),
    (0, 'Add dark mode support', 'low', ['Feature', 'Design']),
    (0, 'Write API documentation', None, []),
    (1, 'Create API endpoints', 'high', ['Backend']),
    (1, 'Fix responsive layout issues', 'medium', ['Bug']),
    (2, 'Set up database migrations', 'medium', ['Backend']),
    (3, 'Implement user authentication', 'high', ['Feature', 'Backend']),
]


class Command(BaseCommand):
    help = 'Creates demo users and a demo board'

    def add_arguments(self, parser):
        parser.add_argument('--password', default='demo123', help='Password for the demo accounts')
        parser.add_argument('--reset', action='store_true', help='Delete the existing demo board first')

    def handle(self, *args, **options):
        """
        Seeds through the services so positions and memberships follow
        the same rules as the API
        """
        services = apps.get_app_config('board').services

        owner = self._get_or_create_user('demo', 'Demo User', options['password'])
        teammate = self._get_or_create_user('alex', 'Alex Teammate', options['password'])

        existing = Board.objects.filter(owner=owner, name='Demo Board')
        if existing.exists():
            if not options['reset']:
                raise CommandError('Demo board already exists (use --reset to recreate it)')
            existing.delete()
            self.stdout.write('🗑️  Previous demo board removed')

        with transaction.atomic():
            board = services.boards.create_board(owner, {'name': 'Demo Board'})
            services.boards.add_member(board['id'], owner, teammate.username)

            columns = [
                services.columns.create_column(board['id'], owner, {'name': name, 'is_done': is_done})
                for name, is_done in DEMO_COLUMNS
            ]
            labels = {
                name: services.labels.create_label(board['id'], owner, {'name': name, 'color': color})
                for name, color in DEMO_LABELS
            }

            for index, (column_index, title, priority, label_names) in enumerate(DEMO_CARDS):
                services.cards.create_card(columns[column_index]['id'], owner, {
                    'title': title,
                    'priority': priority,
                    'assignee_id': teammate.id if index % 2 else owner.id,
                    'label_ids': [labels[name]['id'] for name in label_names],
                    'subtasks': [],
                    'comments': [],
                })

        self.stdout.write(
            self.style.SUCCESS(
                f"✅ Demo board #{board['id']} created with {len(columns)} columns and {len(DEMO_CARDS)} cards\n"
                f"🔑 Log in as demo/{options['password']} or alex/{options['password']}"
            )
        )

    def _get_or_create_user(self, username, display_name, password):
        user, created = User.objects.get_or_create(
            username=username,
            defaults={'display_name': display_name}
        )
        if created:
            user.set_password(password)
            user.save()
            self.stdout.write(f'👤 User {username} created')
        return user
