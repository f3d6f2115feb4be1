"""Django views for the arcanalinks app.

The views expose the linking engine to the article editor as small JSON
endpoints: scanning a draft for link suggestions, applying the reviewed
suggestions, rendering shortcodes into anchors and validating shortcodes
against the stored registry. Each view validates its payload with the forms
and delegates the work to the services.
"""

from __future__ import annotations

import logging

from django.contrib.auth.decorators import login_required
from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_POST

from .forms import ApplyForm, ContentForm, ScanForm
from .services import (
    apply_suggestions,
    build_excerpt,
    build_link_registry,
    check_content,
    preview_suggestions,
    render_content,
    suggest_links,
)

logger = logging.getLogger(__name__)


def _form_errors(form) -> JsonResponse:
    logger.info('Rejected %s payload: %s', form.__class__.__name__, form.errors.as_json())
    return JsonResponse({'errors': form.errors.get_json_data()}, status=400)


@login_required
@require_POST
def scan(request: HttpRequest) -> JsonResponse:
    """Return link suggestions and a highlighted preview for a draft."""

    form = ScanForm(request.POST)
    if not form.is_valid():
        return _form_errors(form)

    content: str = form.cleaned_data['content']
    suggestions = suggest_links(content, form.scan_options())
    return JsonResponse(
        {
            'suggestions': [suggestion.as_dict() for suggestion in suggestions],
            'preview': preview_suggestions(content, suggestions),
        }
    )


@login_required
@require_POST
def apply(request: HttpRequest) -> JsonResponse:
    """Apply the selected suggestions and return the rewritten content."""

    form = ApplyForm(request.POST)
    if not form.is_valid():
        return _form_errors(form)

    suggestions = form.cleaned_data['suggestions']
    content = apply_suggestions(form.cleaned_data['content'], suggestions)
    return JsonResponse(
        {
            'content': content,
            'applied': sum(1 for suggestion in suggestions if suggestion.selected),
        }
    )


@login_required
@require_POST
def render(request: HttpRequest) -> JsonResponse:
    """Expand shortcodes into anchors and return an excerpt of the result."""

    form = ContentForm(request.POST)
    if not form.is_valid():
        return _form_errors(form)

    content: str = form.cleaned_data['content']
    registry = build_link_registry()
    return JsonResponse(
        {
            'html': render_content(content, registry),
            'excerpt': build_excerpt(content, registry),
        }
    )


@login_required
@require_POST
def validate(request: HttpRequest) -> JsonResponse:
    """Report shortcodes pointing at unknown targets, plus per-type counts."""

    form = ContentForm(request.POST)
    if not form.is_valid():
        return _form_errors(form)

    return JsonResponse(check_content(form.cleaned_data['content']))
