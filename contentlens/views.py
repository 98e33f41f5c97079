"""Django views exposing the engine as a JSON API.

Each view decodes the JSON body, validates it with the matching form,
hands the cleaned values to the engine and serialises the result. The
engine itself never logs; problems worth an operator's attention are
logged here.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from .engine import InvalidInputError, detect_patterns, extract_topics, suggest_links
from .forms import DetectForm, LinkSuggestForm, TopicsForm
from .services import (
    detection_to_payload,
    get_engine_config,
    html_to_text,
    suggestions_to_payload,
)

logger = logging.getLogger(__name__)


class _BadRequest(Exception):
    def __init__(self, payload: Dict[str, Any]) -> None:
        super().__init__(payload)
        self.payload = payload


def _decode_body(request: HttpRequest) -> Dict[str, Any]:
    try:
        body = json.loads(request.body or b'{}')
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise _BadRequest({'detail': 'Request body must be valid JSON.'}) from None
    if not isinstance(body, dict):
        raise _BadRequest({'detail': 'Request body must be a JSON object.'})
    return body


def _bind(form_class, request: HttpRequest):
    form = form_class(_decode_body(request))
    if not form.is_valid():
        raise _BadRequest({'errors': form.errors.get_json_data()})
    return form.cleaned_data


def _prepared_content(cleaned: Dict[str, Any]) -> str:
    content: str = cleaned['content']
    if cleaned.get('is_html'):
        content = html_to_text(content)
    return content


@csrf_exempt
@require_POST
def detect(request: HttpRequest) -> JsonResponse:
    """Scan content against the supplied detection rules."""

    try:
        cleaned = _bind(DetectForm, request)
        config = get_engine_config()
        result = detect_patterns(_prepared_content(cleaned), cleaned['rules'], config)
    except _BadRequest as exc:
        return JsonResponse(exc.payload, status=400)
    except InvalidInputError as exc:
        logger.info('Rejected detection request: %s', exc)
        return JsonResponse({'detail': str(exc)}, status=400)

    if result.skipped_rules:
        logger.warning('Skipped %d detection rule(s) that failed to compile: %s',
                       len(result.skipped_rules), ', '.join(result.skipped_rules))
    return JsonResponse(detection_to_payload(result, config))


@csrf_exempt
@require_POST
def topics(request: HttpRequest) -> JsonResponse:
    """Extract ranked topics from content."""

    try:
        cleaned = _bind(TopicsForm, request)
        found = extract_topics(_prepared_content(cleaned), cleaned.get('max_topics'), get_engine_config())
    except _BadRequest as exc:
        return JsonResponse(exc.payload, status=400)
    except InvalidInputError as exc:
        logger.info('Rejected topic request: %s', exc)
        return JsonResponse({'detail': str(exc)}, status=400)
    return JsonResponse({'topics': found})


@csrf_exempt
@require_POST
def suggest(request: HttpRequest) -> JsonResponse:
    """Rank indexed pages for the article and locate insertion points."""

    try:
        cleaned = _bind(LinkSuggestForm, request)
        content = _prepared_content(cleaned)
        config = get_engine_config()
        article_topics = extract_topics(content, None, config)
        placed = suggest_links(
            content,
            cleaned.get('title') or '',
            cleaned['pages'],
            article_topics=article_topics,
            min_score=cleaned.get('min_score'),
            max_results=cleaned.get('max_results'),
            exclude_urls=cleaned['exclude_urls'],
            config=config,
        )
    except _BadRequest as exc:
        return JsonResponse(exc.payload, status=400)
    except InvalidInputError as exc:
        logger.info('Rejected link suggestion request: %s', exc)
        return JsonResponse({'detail': str(exc)}, status=400)

    return JsonResponse({'topics': article_topics, 'suggestions': suggestions_to_payload(placed)})


@require_GET
def health(request: HttpRequest) -> JsonResponse:
    """Report that the service is up and which tunables are loaded."""

    config = get_engine_config()
    detection = config.section('detection')
    return JsonResponse(
        {
            'status': 'ok',
            'scoreScale': detection.get('score_scale'),
            'severityWeights': detection.get('severity_weights'),
        }
    )
