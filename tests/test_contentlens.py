from __future__ import annotations

import json
from types import SimpleNamespace

from django.core.cache import cache
from django.http import HttpResponse
from django.test import Client, RequestFactory, SimpleTestCase, override_settings
from django.urls import reverse

from contentlens.engine import InvalidInputError
from contentlens.middleware import SlidingWindowRateThrottle
from contentlens.services import html_to_text, pages_from_payload, rules_from_payload

CLICHE_TEXT = "In today's world, businesses must adapt. In today's world, speed wins."

ARTICLE = (
    'Internal linking shapes how crawlers see a site. '
    'Good internal linking spreads authority across pages. '
    'Anchor text should describe the target page. '
    'Audits catch broken linking and weak anchor text.'
)

PAGES = [
    {
        'id': 'anchors',
        'url': 'https://example.com/anchor-text',
        'title': 'Anchor Text Guide',
        'summary': 'How to write anchor text.',
        'keyTopics': ['anchor', 'text'],
        'wordCount': 1500,
    },
    {
        'id': 'linking',
        'url': 'https://example.com/internal-linking',
        'title': 'Internal Linking Playbook',
        'key_topics': ['linking', 'internal', 'crawlers'],
        'word_count': 2400,
    },
    {
        'id': 'recipes',
        'url': 'https://example.com/recipes',
        'title': 'Soup Recipes',
        'keyTopics': ['soup'],
        'wordCount': 800,
    },
]


class ApiTestCase(SimpleTestCase):
    def setUp(self) -> None:
        cache.clear()

    def post_json(self, name: str, payload):
        body = payload if isinstance(payload, str) else json.dumps(payload)
        return self.client.post(reverse(name), data=body, content_type='application/json')


class DetectViewTests(ApiTestCase):
    def test_detect_returns_report(self) -> None:
        response = self.post_json(
            'contentlens:detect',
            {
                'content': CLICHE_TEXT,
                'rules': [
                    {
                        'id': 'todays-world',
                        'name': "In today's world",
                        'pattern': "in today's world",
                        'category': 'cliché',
                        'severity': 'medium',
                        'isActive': True,
                        'replacementOptions': ['Today', 'Now'],
                    }
                ],
            },
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['totalMatches'], 2)
        self.assertEqual(data['matchesByCategory'], {'cliché': 2})
        self.assertEqual(data['aiScore'], 100.0)
        self.assertEqual(data['band'], 'ai-patterned')
        self.assertEqual(data['wordCount'], 11)
        first = data['matches'][0]
        self.assertEqual(first['location'], {'start': 0, 'end': 16})
        self.assertEqual(first['matchedText'], "In today's world")
        self.assertEqual(first['replacementOptions'], ['Today', 'Now'])
        self.assertEqual(data['skippedRules'], [])

    def test_detect_strips_markup_when_html(self) -> None:
        response = self.post_json(
            'contentlens:detect',
            {
                'content': "<p>In today's world, speed wins.</p><script>var x = \"in today's world\";</script>",
                'is_html': True,
                'rules': [{'id': 'todays-world', 'pattern': "in today's world"}],
            },
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['totalMatches'], 1)
        self.assertEqual(data['matches'][0]['location'], {'start': 0, 'end': 16})

    def test_detect_without_rules_scores_zero(self) -> None:
        response = self.post_json('contentlens:detect', {'content': CLICHE_TEXT})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['aiScore'], 0.0)
        self.assertEqual(response.json()['band'], 'human-like')

    def test_detect_logs_and_reports_skipped_rules(self) -> None:
        with self.assertLogs('contentlens.views', 'WARNING') as logs:
            response = self.post_json(
                'contentlens:detect',
                {
                    'content': CLICHE_TEXT,
                    'rules': [
                        {'id': 'broken', 'pattern': '([a-z', 'patternType': 'regex'},
                        {'id': 'speed', 'pattern': 'speed wins'},
                    ],
                },
            )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['skippedRules'], ['broken'])
        self.assertEqual(response.json()['totalMatches'], 1)
        self.assertIn('broken', logs.output[0])

    def test_detect_rejects_invalid_json(self) -> None:
        response = self.post_json('contentlens:detect', '{not json')

        self.assertEqual(response.status_code, 400)
        self.assertIn('valid JSON', response.json()['detail'])

    def test_detect_rejects_non_object_body(self) -> None:
        response = self.post_json('contentlens:detect', [CLICHE_TEXT])

        self.assertEqual(response.status_code, 400)
        self.assertIn('JSON object', response.json()['detail'])

    def test_detect_rejects_non_string_content(self) -> None:
        response = self.post_json('contentlens:detect', {'content': 42})

        self.assertEqual(response.status_code, 400)
        self.assertIn('content', response.json()['errors'])

    def test_detect_rejects_rule_without_id(self) -> None:
        response = self.post_json('contentlens:detect', {'content': CLICHE_TEXT, 'rules': [{'pattern': 'speed'}]})

        self.assertEqual(response.status_code, 400)
        self.assertIn('missing an id', response.json()['errors']['rules'][0]['message'])

    def test_detect_requires_post(self) -> None:
        response = self.client.get(reverse('contentlens:detect'))

        self.assertEqual(response.status_code, 405)


class TopicsViewTests(ApiTestCase):
    def test_topics_are_ranked_and_truncated(self) -> None:
        response = self.post_json(
            'contentlens:topics',
            {'content': 'growth marketing growth seo marketing content content content', 'max_topics': 2},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'topics': ['content', 'growth']})

    def test_topics_use_default_limit(self) -> None:
        response = self.post_json('contentlens:topics', {'content': ARTICLE})

        self.assertEqual(response.json()['topics'], ['linking', 'internal', 'anchor', 'text'])

    def test_topics_reject_out_of_range_limit(self) -> None:
        response = self.post_json('contentlens:topics', {'content': ARTICLE, 'max_topics': 500})

        self.assertEqual(response.status_code, 400)
        self.assertIn('max_topics', response.json()['errors'])


class SuggestLinksViewTests(ApiTestCase):
    def test_suggestions_are_ranked_with_insertion_points(self) -> None:
        response = self.post_json(
            'contentlens:suggest_links',
            {'content': ARTICLE, 'title': 'Internal Linking Basics', 'pages': PAGES},
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['topics'], ['linking', 'internal', 'anchor', 'text'])
        self.assertEqual([item['pageId'] for item in data['suggestions']], ['linking', 'anchors'])
        top = data['suggestions'][0]
        self.assertEqual(top['relevanceScore'], 46)
        self.assertEqual(top['matchedTopics'], ['linking', 'internal'])
        self.assertEqual(top['reason'], '2 topic matches, title keyword match')
        self.assertEqual(top['suggestedAnchor'], 'Internal Linking Playbook')
        self.assertEqual(
            top['insertionPoint'],
            {'sentence': 'Internal linking shapes how crawlers see a site.', 'position': 0},
        )

    def test_excluded_urls_are_skipped(self) -> None:
        response = self.post_json(
            'contentlens:suggest_links',
            {
                'content': ARTICLE,
                'title': 'Internal Linking Basics',
                'pages': PAGES,
                'exclude_urls': ['HTTPS://EXAMPLE.COM/INTERNAL-LINKING'],
                'max_results': 5,
            },
        )

        self.assertEqual([item['pageId'] for item in response.json()['suggestions']], ['anchors'])

    def test_page_without_url_is_rejected(self) -> None:
        response = self.post_json(
            'contentlens:suggest_links',
            {'content': ARTICLE, 'pages': [{'id': 'orphan', 'title': 'No URL'}]},
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn('pages', response.json()['errors'])

    def test_page_with_non_string_title_is_rejected(self) -> None:
        for field, value in (('title', 5), ('summary', ['seo']), ('metaDescription', 1)):
            with self.subTest(field=field):
                page = {'id': 'p', 'url': 'https://example.com/x', 'keyTopics': ['seo'], field: value}
                response = self.post_json('contentlens:suggest_links', {'content': ARTICLE, 'pages': [page]})

                self.assertEqual(response.status_code, 400)
                self.assertIn('pages', response.json()['errors'])

    def test_exclude_urls_must_be_strings(self) -> None:
        response = self.post_json(
            'contentlens:suggest_links',
            {'content': ARTICLE, 'pages': PAGES, 'exclude_urls': [1, 2]},
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn('exclude_urls', response.json()['errors'])


class HealthViewTests(ApiTestCase):
    def test_health_reports_loaded_tunables(self) -> None:
        response = self.client.get(reverse('contentlens:health'))

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['status'], 'ok')
        self.assertEqual(data['scoreScale'], 10000.0)
        self.assertEqual(data['severityWeights'], {'low': 1, 'medium': 2, 'high': 3})


class RateLimitMiddlewareTests(SimpleTestCase):
    def setUp(self) -> None:
        cache.clear()
        self.factory = RequestFactory()

    @override_settings(THROTTLED_ROUTES=['sample:action'])
    def test_rate_limit_blocks_after_threshold(self) -> None:
        middleware = SlidingWindowRateThrottle(lambda request: HttpResponse('OK'), limit=2, window=60,
                                               key_prefix='test-rate')

        def check():
            req = self.factory.post('/sample-action/')
            req.resolver_match = SimpleNamespace(namespace='sample', url_name='action', view_name='sample:action')
            req.META['REMOTE_ADDR'] = '127.0.0.1'
            return middleware.process_view(req, None, (), {})

        self.assertIsNone(check())
        self.assertIsNone(check())
        blocked = check()
        self.assertEqual(blocked.status_code, 429)
        self.assertIn('Retry-After', blocked)

    @override_settings(THROTTLED_ROUTES=['sample:action'])
    def test_get_requests_are_not_counted(self) -> None:
        middleware = SlidingWindowRateThrottle(lambda request: HttpResponse('OK'), limit=1, window=60,
                                               key_prefix='test-rate')
        req = self.factory.get('/sample-action/')
        req.resolver_match = SimpleNamespace(namespace='sample', url_name='action', view_name='sample:action')

        self.assertIsNone(middleware.process_view(req, None, (), {}))
        self.assertIsNone(middleware.process_view(req, None, (), {}))

    @override_settings(THROTTLE_LIMIT=2)
    def test_api_route_is_throttled_per_client(self) -> None:
        client = Client(REMOTE_ADDR='10.0.0.7')
        url = reverse('contentlens:topics')
        payload = json.dumps({'content': ARTICLE})

        statuses = [client.post(url, data=payload, content_type='application/json').status_code for _ in range(3)]

        self.assertEqual(statuses, [200, 200, 429])
        other = Client(REMOTE_ADDR='10.0.0.8')
        self.assertEqual(other.post(url, data=payload, content_type='application/json').status_code, 200)


class PayloadServiceTests(SimpleTestCase):
    def test_html_to_text_drops_scripts_and_styles(self) -> None:
        html = '<h1>Title</h1><style>p { color: red; }</style><p>Body text.</p><script>alert(1)</script>'

        self.assertEqual(html_to_text(html), 'Title\nBody text.')

    def test_rules_accept_snake_case_keys(self) -> None:
        rules = rules_from_payload(
            [{'id': 7, 'pattern': 'delve', 'is_active': False, 'pattern_type': 'regex', 'case_sensitive': True}]
        )

        self.assertEqual(rules[0].id, '7')
        self.assertFalse(rules[0].active)
        self.assertEqual(rules[0].pattern_type, 'regex')
        self.assertTrue(rules[0].case_sensitive)

    def test_rule_replacement_options_must_be_a_list(self) -> None:
        with self.assertRaises(InvalidInputError):
            rules_from_payload([{'id': 'x', 'pattern': 'delve', 'replacementOptions': 'explore'}])

    def test_pages_accept_camel_case_keys(self) -> None:
        pages = pages_from_payload([PAGES[0]])

        self.assertEqual(pages[0].key_topics, ('anchor', 'text'))
        self.assertEqual(pages[0].word_count, 1500)

    def test_page_word_count_must_be_integer(self) -> None:
        with self.assertRaises(InvalidInputError):
            pages_from_payload([{'id': 'p', 'url': 'https://example.com', 'wordCount': '1200'}])
