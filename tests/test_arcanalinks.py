from __future__ import annotations

import json
import tempfile
from pathlib import Path

from django.contrib.auth import get_user_model
from django.conf import settings
from django.test import Client, TestCase, override_settings
from django.urls import reverse

from arcanalinks.engine.types import LinkType, ScanOptions
from arcanalinks.forms import ApplyForm, ScanForm
from arcanalinks.models import LinkTarget
from arcanalinks.services import (
    build_excerpt,
    build_link_registry,
    check_content,
    get_engine_config,
    suggest_links,
)


def create_catalog() -> None:
    LinkTarget.objects.create(link_type='tarot', slug='the-world', title='The World')
    LinkTarget.objects.create(link_type='tarot', slug='death', title='Death')
    LinkTarget.objects.create(link_type='tarot', slug='the-fool', title='The Fool')
    LinkTarget.objects.create(link_type='blog', slug='moon-rituals', title='Moon Rituals')
    LinkTarget.objects.create(link_type='spread', slug='celtic-cross', title='Celtic Cross Spread')


class SettingsTests(TestCase):
    def test_test_run_is_detected_at_settings_import(self) -> None:
        self.assertTrue(settings.RUNNING_TESTS)


class RegistryServiceTests(TestCase):
    def setUp(self) -> None:
        create_catalog()

    def test_registry_groups_by_type_and_orders_by_title(self) -> None:
        registry = build_link_registry()

        self.assertEqual([entry.slug for entry in registry.tarot], ['death', 'the-fool', 'the-world'])
        self.assertEqual(registry.title_for(LinkType.BLOG, 'moon-rituals'), 'Moon Rituals')
        self.assertEqual(registry.horoscope, ())

    def test_suggest_links_uses_stored_targets(self) -> None:
        suggestions = suggest_links(
            'The Fool meets Death.',
            ScanOptions(current_article_slug='death'),
        )

        self.assertEqual([suggestion.slug for suggestion in suggestions], ['the-fool'])

    def test_check_content_reports_unknown_targets(self) -> None:
        report = check_content('[[tarot:death]] [[blog:missing|Gone]] [[horoscope:leo]]')

        self.assertEqual(
            [item['slug'] for item in report['invalid']],
            ['missing', 'leo'],
        )
        self.assertEqual(report['counts']['total'], 3)
        self.assertEqual(report['counts']['tarot'], 1)


class ExcerptTests(TestCase):
    def test_excerpt_drops_markup_and_shortcodes(self) -> None:
        create_catalog()
        content = '<p>Draw [[tarot:the-fool]]\n and   <em>[[tarot:death|the reaper]]</em>.</p>'

        self.assertEqual(build_excerpt(content, build_link_registry()), 'Draw The Fool and the reaper .')

    def test_excerpt_is_truncated(self) -> None:
        excerpt = build_excerpt('<p>' + 'word ' * 100 + '</p>', max_length=20)

        self.assertEqual(excerpt, 'word word word word…')

    def test_empty_excerpt(self) -> None:
        self.assertEqual(build_excerpt(''), '')


class ScanFormTests(TestCase):
    def test_missing_switches_keep_defaults(self) -> None:
        form = ScanForm({'content': 'Some text', 'current_article_slug': ' death '})
        self.assertTrue(form.is_valid(), form.errors)

        options = form.scan_options()

        self.assertEqual(options, ScanOptions(current_article_slug='death'))

    def test_switches_accept_explicit_values(self) -> None:
        form = ScanForm({'content': 'Some text', 'skip_existing_links': 'false', 'case_sensitive': 'true'})
        self.assertTrue(form.is_valid(), form.errors)

        options = form.scan_options()

        self.assertFalse(options.skip_existing_links)
        self.assertTrue(options.case_sensitive)
        self.assertTrue(options.first_occurrence_only)

    def test_content_is_required(self) -> None:
        self.assertFalse(ScanForm({'content': ''}).is_valid())


class ApplyFormTests(TestCase):
    def form(self, suggestions) -> ApplyForm:
        return ApplyForm({'content': 'The Fool', 'suggestions': json.dumps(suggestions)})

    def test_parses_suggestions(self) -> None:
        form = self.form(
            [{'type': 'tarot', 'slug': 'the-fool', 'shortcode': '[[tarot:the-fool]]', 'position': 0, 'length': 8}]
        )
        self.assertTrue(form.is_valid(), form.errors)

        parsed = form.cleaned_data['suggestions']

        self.assertEqual(len(parsed), 1)
        self.assertIs(parsed[0].type, LinkType.TAROT)
        self.assertTrue(parsed[0].selected)

    def test_rejects_invalid_json(self) -> None:
        form = ApplyForm({'content': 'x', 'suggestions': '[not json'})
        self.assertFalse(form.is_valid())
        self.assertIn('valid JSON', form.errors['suggestions'][0])

    def test_errors_name_the_offending_suggestion(self) -> None:
        good = {'type': 'tarot', 'shortcode': '[[tarot:a]]', 'position': 0, 'length': 1}

        unknown_type = self.form([good, {**good, 'type': 'oracle'}])
        self.assertFalse(unknown_type.is_valid())
        self.assertIn('Suggestion 2', unknown_type.errors['suggestions'][0])

        negative = self.form([{**good, 'position': -1}])
        self.assertFalse(negative.is_valid())
        self.assertIn('Suggestion 1', negative.errors['suggestions'][0])

        missing = self.form([{'type': 'blog', 'position': 'x'}])
        self.assertFalse(missing.is_valid())
        self.assertIn('Suggestion 1', missing.errors['suggestions'][0])

    def test_rejects_non_array(self) -> None:
        form = ApplyForm({'content': 'x', 'suggestions': '{}'})
        self.assertFalse(form.is_valid())


class EndpointTests(TestCase):
    def setUp(self) -> None:
        create_catalog()
        self.client = Client()
        self.user = get_user_model().objects.create_user(username='editor', password='password123')
        self.client.force_login(self.user)
        get_engine_config.cache_clear()

    def tearDown(self) -> None:
        get_engine_config.cache_clear()

    def test_endpoints_require_login(self) -> None:
        self.client.logout()
        for name in ('scan', 'apply', 'render', 'validate'):
            response = self.client.post(reverse(f'arcanalinks:{name}'), {'content': 'x'})
            self.assertEqual(response.status_code, 302)
            self.assertIn(reverse('admin:login'), response.url)

    def test_endpoints_reject_get(self) -> None:
        response = self.client.get(reverse('arcanalinks:scan'))
        self.assertEqual(response.status_code, 405)

    def test_scan_returns_suggestions_and_preview(self) -> None:
        response = self.client.post(
            reverse('arcanalinks:scan'),
            {'content': 'Read <a href="/x">The Fool</a> and Moon Rituals.', 'skip_existing_links': 'false'},
        )

        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(
            [item['shortcode'] for item in payload['suggestions']],
            ['[[tarot:the-fool|The Fool]]', '[[blog:moon-rituals|Moon Rituals]]'],
        )
        self.assertEqual(payload['suggestions'][0]['type'], 'tarot')
        self.assertEqual(
            payload['preview'],
            'Read <mark class="link-suggestion">The Fool</mark> and '
            '<mark class="link-suggestion">Moon Rituals</mark>.',
        )

    def test_scan_rejects_missing_content(self) -> None:
        response = self.client.post(reverse('arcanalinks:scan'), {})

        self.assertEqual(response.status_code, 400)
        self.assertIn('content', response.json()['errors'])

    def test_scan_then_apply_round_trip(self) -> None:
        content = 'The Fool meets Death.'
        scanned = self.client.post(reverse('arcanalinks:scan'), {'content': content}).json()
        suggestions = scanned['suggestions']
        suggestions[1]['selected'] = False

        response = self.client.post(
            reverse('arcanalinks:apply'),
            {'content': content, 'suggestions': json.dumps(suggestions)},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {'content': '[[tarot:the-fool|The Fool]] meets Death.', 'applied': 1},
        )

    def test_apply_reports_form_errors(self) -> None:
        response = self.client.post(
            reverse('arcanalinks:apply'),
            {'content': 'x', 'suggestions': '[{"type": "oracle"}]'},
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn('Suggestion 1', response.json()['errors']['suggestions'][0]['message'])

    def test_render_returns_html_and_excerpt(self) -> None:
        response = self.client.post(
            reverse('arcanalinks:render'),
            {'content': '<p>Try the [[spread:celtic-cross-reading|Celtic Cross]] with [[tarot:death]].</p>'},
        )

        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertIn(
            '<a href="/reading/celtic-cross" class="internal-link" data-link-type="spread" '
            'target="_blank" rel="noopener noreferrer">Celtic Cross</a>',
            payload['html'],
        )
        self.assertIn('>Death</a>', payload['html'])
        self.assertEqual(payload['excerpt'], 'Try the Celtic Cross with Death.')

    def test_validate_returns_invalid_and_counts(self) -> None:
        response = self.client.post(
            reverse('arcanalinks:validate'),
            {'content': '[[tarot:death]] [[tarot:the-magician]]'},
        )

        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload['counts']['tarot'], 2)
        self.assertEqual(
            payload['invalid'],
            [
                {
                    'shortcode': '[[tarot:the-magician]]',
                    'type': 'tarot',
                    'slug': 'the-magician',
                    'reason': 'No tarot found with slug "the-magician"',
                }
            ],
        )

    def test_engine_config_file_is_honoured(self) -> None:
        with tempfile.TemporaryDirectory() as directory:
            path = Path(directory) / 'engine.yaml'
            path.write_text('anchor:\n  target: _self\n', encoding='utf-8')
            with override_settings(ARCANALINKS_ENGINE_CONFIG=str(path)):
                get_engine_config.cache_clear()
                response = self.client.post(reverse('arcanalinks:render'), {'content': '[[tarot:death]]'})

        self.assertIn('target="_self"', response.json()['html'])
