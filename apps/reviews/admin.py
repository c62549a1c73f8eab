from django.contrib import admin
from .models import CommentFiles, Comments


class CommentFilesInline(admin.TabularInline):
    model = CommentFiles
    extra = 0
    readonly_fields = ['uuid', 'file_name', 'file_type', 'file_size', 'file_path']


@admin.register(Comments)
class CommentsAdmin(admin.ModelAdmin):
    list_display = ['comment_id', 'option', 'user', 'created_at']
    search_fields = ['content', 'user__email']
    ordering = ['-created_at']
    inlines = [CommentFilesInline]
