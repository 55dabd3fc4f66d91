# apps/core/admin.py

"""
Admin for inspection and support

Position fields are read-only: edits from here would bypass the
sequencer and break dense ordering.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html

from .models import Board, BoardMember, Card, Column, Label, User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Custom user admin"""

    list_display = ['username', 'display_name', 'email', 'is_active', 'date_joined']
    list_filter = ['is_staff', 'is_active', 'date_joined']
    search_fields = ['username', 'display_name', 'email']
    ordering = ['-date_joined']

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Profile', {
            'fields': ('display_name',)
        }),
    )

    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Profile', {
            'fields': ('display_name',)
        }),
    )


class BoardMemberInline(admin.TabularInline):
    model = BoardMember
    extra = 0
    fields = ['user', 'role']
    raw_id_fields = ['user']


class ColumnInline(admin.TabularInline):
    model = Column
    extra = 0
    fields = ['name', 'position', 'is_done']
    readonly_fields = ['position']
    ordering = ['position']


@admin.register(Board)
class BoardAdmin(admin.ModelAdmin):
    """Kanban boards"""

    list_display = ['name', 'owner', 'members_count', 'columns_count', 'updated_at']
    search_fields = ['name', 'owner__username']
    readonly_fields = ['created_at', 'updated_at']
    raw_id_fields = ['owner']

    inlines = [BoardMemberInline, ColumnInline]

    def members_count(self, obj):
        return obj.members.count()

    members_count.short_description = 'Members'

    def columns_count(self, obj):
        return obj.columns.count()

    columns_count.short_description = 'Columns'


@admin.register(Column)
class ColumnAdmin(admin.ModelAdmin):
    """Board columns"""

    list_display = ['name', 'board', 'position', 'is_done', 'active_cards']
    list_filter = ['is_done', 'board']
    search_fields = ['name', 'board__name']
    ordering = ['board', 'position']
    readonly_fields = ['position', 'created_at']

    def active_cards(self, obj):
        return obj.cards.filter(archived_at__isnull=True).count()

    active_cards.short_description = 'Cards'


@admin.register(Card)
class CardAdmin(admin.ModelAdmin):
    """Cards"""

    list_display = ['id', 'title', 'column', 'position', 'priority_badge', 'assignee', 'due_date', 'archived_at']
    list_filter = ['priority', 'column__board', 'archived_at']
    search_fields = ['title', 'description']
    date_hierarchy = 'created_at'
    raw_id_fields = ['assignee']
    filter_horizontal = ['labels']
    readonly_fields = ['column', 'position', 'archived_at', 'created_at', 'updated_at']

    fieldsets = (
        ('Card', {
            'fields': ('title', 'description', 'column', 'position', 'assignee', 'labels')
        }),
        ('Details', {
            'fields': ('priority', 'due_date', 'color', 'subtasks', 'comments')
        }),
        ('Metadata', {
            'fields': ('archived_at', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )

    def priority_badge(self, obj):
        """Colored priority badge"""
        colors = {
            'low': '#10B981',
            'medium': '#F59E0B',
            'high': '#EF4444',
        }
        if not obj.priority:
            return '-'
        return format_html(
            '<span style="background-color: {}; color: white; '
            'padding: 3px 8px; border-radius: 4px; font-size: 11px;">{}</span>',
            colors.get(obj.priority, '#6B7280'),
            obj.get_priority_display()
        )

    priority_badge.short_description = 'Priority'


@admin.register(Label)
class LabelAdmin(admin.ModelAdmin):
    """Board labels"""

    list_display = ['name', 'board', 'color_preview']
    list_filter = ['board']
    search_fields = ['name']

    def color_preview(self, obj):
        return format_html(
            '<div style="width: 20px; height: 20px; background-color: {}; '
            'border: 1px solid #ccc; border-radius: 3px;"></div>',
            obj.color
        )

    color_preview.short_description = 'Color'
