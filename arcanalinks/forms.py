"""Forms for the arcanalinks endpoints.

The forms validate the payloads posted by the article editor: raw content to
scan, scan switches, and the reviewed suggestion list to apply.
"""

from __future__ import annotations

import json

from django import forms

from .engine.types import LinkSuggestion, LinkType, ScanOptions


class ContentForm(forms.Form):
    """Form carrying a block of article content."""

    content = forms.CharField(
        strip=False,
        widget=forms.Textarea(attrs={'rows': 18}),
        label='Content',
        help_text='Article body, optionally containing HTML and shortcodes.',
    )


class ScanForm(ContentForm):
    """Form used to request link suggestions for a draft."""

    current_article_slug = forms.CharField(
        required=False,
        max_length=255,
        label='Current article slug',
        help_text='Slug of the article being edited; it is never suggested as a link.',
    )
    skip_existing_links = forms.NullBooleanField(
        required=False,
        label='Skip existing links',
        help_text='Leave text inside <a> tags alone instead of converting it to shortcodes.',
    )
    skip_existing_shortcodes = forms.NullBooleanField(
        required=False,
        label='Skip existing shortcodes',
    )
    first_occurrence_only = forms.NullBooleanField(
        required=False,
        label='First occurrence only',
        help_text='Suggest each term once rather than at every mention.',
    )
    case_sensitive = forms.NullBooleanField(required=False, label='Case sensitive')

    def scan_options(self) -> ScanOptions:
        """Return :class:`ScanOptions` built from the cleaned data.

        Switches left out of the request keep the engine defaults.
        """

        defaults = ScanOptions()
        data = self.cleaned_data

        def _switch(name: str) -> bool:
            value = data.get(name)
            return getattr(defaults, name) if value is None else value

        return ScanOptions(
            skip_existing_links=_switch('skip_existing_links'),
            skip_existing_shortcodes=_switch('skip_existing_shortcodes'),
            first_occurrence_only=_switch('first_occurrence_only'),
            case_sensitive=_switch('case_sensitive'),
            current_article_slug=(data.get('current_article_slug') or '').strip(),
        )


class ApplyForm(ContentForm):
    """Form used to apply reviewed suggestions to the content they came from."""

    suggestions = forms.CharField(
        label='Suggestions',
        widget=forms.Textarea(attrs={'rows': 6}),
        help_text='JSON array of suggestions as returned by the scan endpoint.',
    )

    def clean_suggestions(self) -> list[LinkSuggestion]:
        """Parse the JSON array into :class:`LinkSuggestion` values."""

        raw_value = self.cleaned_data.get('suggestions', '')
        try:
            payload = json.loads(raw_value)
        except ValueError as exc:
            raise forms.ValidationError(f'Suggestions must be valid JSON: {exc}') from exc
        if not isinstance(payload, list):
            raise forms.ValidationError('Suggestions must be a JSON array.')

        parsed: list[LinkSuggestion] = []
        for index, item in enumerate(payload, start=1):
            if not isinstance(item, dict):
                raise forms.ValidationError(f'Suggestion {index} must be an object.')
            link_type = LinkType.parse(item.get('type'))
            if link_type is None:
                raise forms.ValidationError(f'Suggestion {index} has an unknown type.')
            try:
                position = int(item['position'])
                length = int(item['length'])
                shortcode = str(item['shortcode'])
            except (KeyError, TypeError, ValueError) as exc:
                raise forms.ValidationError(
                    f'Suggestion {index} needs integer position/length and a shortcode.'
                ) from exc
            if position < 0 or length < 0:
                raise forms.ValidationError(f'Suggestion {index} has a negative offset.')
            parsed.append(
                LinkSuggestion(
                    term=str(item.get('term', '')),
                    type=link_type,
                    slug=str(item.get('slug', '')),
                    title=str(item.get('title', '')),
                    shortcode=shortcode,
                    position=position,
                    length=length,
                    selected=bool(item.get('selected', True)),
                )
            )
        return parsed
