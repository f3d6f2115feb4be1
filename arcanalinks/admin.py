from django.contrib import admin

from .models import LinkTarget


@admin.register(LinkTarget)
class LinkTargetAdmin(admin.ModelAdmin):
    list_display = ('title', 'link_type', 'slug', 'created_at')
    list_filter = ('link_type',)
    search_fields = ('title', 'slug')
    prepopulated_fields = {'slug': ('title',)}
