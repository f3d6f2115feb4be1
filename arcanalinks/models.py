"""Database models for the arcanalinks app.

The app stores the catalog of linkable entities (tarot card articles, blog
posts, spreads and horoscope signs). Each target is identified by its type and
slug; the title is what the scanner matches against article prose and what
rendered shortcodes fall back to as a label.
"""

from __future__ import annotations

from django.db import models

from .engine.types import LinkType


class LinkTarget(models.Model):
    """A page that article content may link to through a shortcode."""

    TYPE_CHOICES = [(link_type.value, link_type.value.title()) for link_type in LinkType]

    link_type = models.CharField(max_length=20, choices=TYPE_CHOICES, db_index=True)
    slug = models.SlugField(max_length=255)
    title = models.CharField(max_length=300)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('link_type', 'slug')
        ordering = ['link_type', 'title']

    def __str__(self) -> str:  # pragma: no cover - convenience display
        return f'[[{self.link_type}:{self.slug}]]'
