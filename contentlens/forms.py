"""Forms validating the JSON request bodies of the API.

Each form receives the decoded JSON document as its ``data``. Field
cleaning converts rule and page records into engine types so the views
only deal with validated input.
"""

from __future__ import annotations

from typing import Any

from django import forms

from .engine import DetectionRule, IndexedPage, InvalidInputError
from .services import pages_from_payload, rules_from_payload


class ContentFormMixin:
    """Shared handling for the ``content`` and ``is_html`` fields."""

    def clean_content(self) -> str:
        raw_value = self.data.get('content', '')  # type: ignore[attr-defined]
        if raw_value is None:
            return ''
        if not isinstance(raw_value, str):
            raise forms.ValidationError('Content must be a string.')
        return raw_value


def _json_list(value: Any, label: str) -> list[Any]:
    if value in (None, ''):
        return []
    if not isinstance(value, list):
        raise forms.ValidationError(f'{label} must be a list.')
    return value


class DetectForm(ContentFormMixin, forms.Form):
    """Form used to scan content against a team's detection rules."""

    content = forms.CharField(required=False, strip=False)
    rules = forms.JSONField(required=False)
    is_html = forms.BooleanField(required=False)

    def clean_rules(self) -> list[DetectionRule]:
        """Convert rule records into :class:`DetectionRule` objects."""

        records = _json_list(self.cleaned_data.get('rules'), 'Rules')
        try:
            return rules_from_payload(records)
        except InvalidInputError as exc:
            raise forms.ValidationError(str(exc)) from exc


class TopicsForm(ContentFormMixin, forms.Form):
    """Form used to extract topics from article or page content."""

    content = forms.CharField(required=False, strip=False)
    max_topics = forms.IntegerField(required=False, min_value=0, max_value=100)
    is_html = forms.BooleanField(required=False)


class LinkSuggestForm(ContentFormMixin, forms.Form):
    """Form used to rank a brand's indexed pages for an article."""

    content = forms.CharField(required=False, strip=False)
    title = forms.CharField(required=False)
    pages = forms.JSONField(required=False)
    min_score = forms.IntegerField(required=False, min_value=0, max_value=100)
    max_results = forms.IntegerField(required=False, min_value=0, max_value=50)
    exclude_urls = forms.JSONField(required=False)
    is_html = forms.BooleanField(required=False)

    def clean_pages(self) -> list[IndexedPage]:
        """Convert page records into :class:`IndexedPage` objects."""

        records = _json_list(self.cleaned_data.get('pages'), 'Pages')
        try:
            return pages_from_payload(records)
        except InvalidInputError as exc:
            raise forms.ValidationError(str(exc)) from exc

    def clean_exclude_urls(self) -> list[str]:
        urls = _json_list(self.cleaned_data.get('exclude_urls'), 'Excluded URLs')
        if not all(isinstance(url, str) for url in urls):
            raise forms.ValidationError('Excluded URLs must be strings.')
        return urls
