"""
AI-Assisted Column Mapping

Asks an LLM (OpenAI or Anthropic) to suggest a source column for each target
field when names differ beyond simple normalization ("Customer Name" vs
"ClientName", "PO Number" vs "PurchaseOrder").

The reply is normalized so every target field appears exactly once, and a
failed call raises instead of leaving a half-applied mapping.
"""

import json
import logging
import os
import re
from typing import Any, Dict, List, Optional, Sequence

from core.models import MappingSuggestion, TargetField, FieldMapping

logger = logging.getLogger(__name__)

# Optional imports
try:
    import openai
    HAS_OPENAI = True
except ImportError:
    HAS_OPENAI = False

try:
    from anthropic import Anthropic
    HAS_ANTHROPIC = True
except ImportError:
    HAS_ANTHROPIC = False


# =============================================================================
# PROMPT
# =============================================================================

MAPPING_PROMPT = """You are an expert data integration assistant. Your task is to map source data columns to target API entity fields.

Source Column Names:
{source_columns}

Target Entity Fields:
{target_fields}

For each target entity field, suggest the best matching source column name.
Provide a confidence score (0-100) for each mapping, where 100 is a perfect match and 0 is no match.
Also provide a brief reasoning for your suggestion (e.g. "Exact name match", "Semantic similarity to 'Client ID'", "No clear match found").

If no source column is a good match for a target field, set "suggestedSourceColumn" to null and "confidenceScore" to a low value (less than 30).
Prioritize exact or very close name matches (case-insensitive, ignoring spaces and underscores).
Consider semantic similarity (e.g. "Customer Name" vs "ClientName", "PO Number" vs "PurchaseOrder").
The field type is a hint; focus primarily on names unless types strongly conflict with common sense for a given name.

Respond with ONLY a JSON object containing a "mappings" array, where each element has
"targetFieldName", "suggestedSourceColumn", "confidenceScore" and "reasoning".
Every target field must appear in the mappings array exactly once."""


class MappingSuggestionError(RuntimeError):
    """Raised when mapping suggestions cannot be obtained."""


def build_prompt(source_columns: Sequence[str], fields: Sequence[TargetField]) -> str:
    columns = '\n'.join(f"- {column}" for column in source_columns)
    targets = '\n'.join(
        f"- Name: {f.name}, Type: {f.field_type.value}" for f in fields
    )
    return MAPPING_PROMPT.format(source_columns=columns, target_fields=targets)


def _extract_json(raw: str) -> Dict[str, Any]:
    """Pull the JSON object out of a reply that may be wrapped in code fences."""
    text = raw.strip()
    fenced = re.search(r'```(?:json)?\s*(.*?)```', text, re.DOTALL)
    if fenced:
        text = fenced.group(1).strip()
    start, end = text.find('{'), text.rfind('}')
    if start == -1 or end == -1:
        raise MappingSuggestionError("AI reply did not contain a JSON object")
    try:
        data = json.loads(text[start:end + 1])
    except json.JSONDecodeError as e:
        raise MappingSuggestionError(f"AI reply was not valid JSON: {e}") from e
    if not isinstance(data, dict) or not isinstance(data.get('mappings'), list):
        raise MappingSuggestionError("AI reply is missing the 'mappings' array")
    return data


def _confidence(value: Any) -> float:
    try:
        score = float(value)
    except (TypeError, ValueError):
        return 0.0
    if score != score:
        return 0.0
    return max(0.0, min(100.0, score))


def normalize_suggestions(
    raw_mappings: List[Any],
    source_columns: Sequence[str],
    fields: Sequence[TargetField],
) -> List[MappingSuggestion]:
    """
    Coerce raw AI output into one suggestion per target field, in field order.

    - Unknown target fields and repeated entries are dropped (first wins)
    - Suggested columns not in source_columns become None
    - Missing target fields get a None suggestion with confidence 0
    """
    known_columns = set(source_columns)
    by_field: Dict[str, MappingSuggestion] = {}
    field_names = {f.name for f in fields}

    for item in raw_mappings:
        if not isinstance(item, dict):
            continue
        name = item.get('targetFieldName')
        if name not in field_names or name in by_field:
            continue

        column = item.get('suggestedSourceColumn')
        reasoning = str(item.get('reasoning') or '')
        if column is not None and column not in known_columns:
            logger.debug("Dropping suggestion %r for %s: not a source column", column, name)
            reasoning = f"Suggested column {column!r} does not exist. {reasoning}".strip()
            column = None

        by_field[name] = MappingSuggestion(
            target_field=name,
            source_column=column,
            confidence=_confidence(item.get('confidenceScore')),
            reasoning=reasoning,
        )

    return [
        by_field.get(f.name) or MappingSuggestion(
            target_field=f.name, source_column=None, confidence=0.0,
            reasoning='No suggestion returned',
        )
        for f in fields
    ]


def suggestions_to_mapping(suggestions: Sequence[MappingSuggestion]) -> FieldMapping:
    return {s.target_field: s.source_column or '' for s in suggestions}


class AIMappingSuggester:
    """
    Suggest column mappings with an LLM.

    Example:
        suggester = AIMappingSuggester.from_env()
        suggestions = suggester.suggest(headers, entity.fields)
    """

    def __init__(
        self,
        ai_provider: str = 'openai',
        ai_api_key: str = '',
        ai_model: Optional[str] = None,
    ):
        if not ai_api_key:
            raise ValueError(f"API key required for AI provider '{ai_provider}'")

        self.ai_provider = ai_provider
        self.ai_model = ai_model
        self.call_count = 0

        if ai_provider == 'openai':
            if not HAS_OPENAI:
                raise ImportError("openai package required. Install with: pip install openai")
            self._ai_client = openai.OpenAI(api_key=ai_api_key)
        elif ai_provider == 'anthropic':
            if not HAS_ANTHROPIC:
                raise ImportError("anthropic package required. Install with: pip install anthropic")
            self._ai_client = Anthropic(api_key=ai_api_key)
        else:
            raise ValueError(f"Unsupported AI provider: {ai_provider}")

    @classmethod
    def from_env(cls) -> 'AIMappingSuggester':
        """Create suggester from environment variables."""
        ai_provider = os.getenv('AI_PROVIDER', 'openai')

        if ai_provider == 'openai':
            ai_key = os.getenv('OPENAI_API_KEY', '')
            ai_model = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')
        elif ai_provider == 'anthropic':
            ai_key = os.getenv('ANTHROPIC_API_KEY', '')
            ai_model = os.getenv('ANTHROPIC_MODEL', 'claude-3-haiku-20240307')
        else:
            ai_key = ''
            ai_model = None

        return cls(ai_provider=ai_provider, ai_api_key=ai_key, ai_model=ai_model)

    def _call_ai(self, prompt: str, max_tokens: int = 2000) -> str:
        if self.ai_provider == 'openai':
            response = self._ai_client.chat.completions.create(
                model=self.ai_model or 'gpt-4o-mini',
                messages=[{'role': 'user', 'content': prompt}],
                temperature=0,
                max_tokens=max_tokens,
                response_format={'type': 'json_object'},
            )
            self.call_count += 1
            return (response.choices[0].message.content or '').strip()

        response = self._ai_client.messages.create(
            model=self.ai_model or 'claude-3-haiku-20240307',
            max_tokens=max_tokens,
            temperature=0,
            messages=[{'role': 'user', 'content': prompt}],
        )
        self.call_count += 1
        return response.content[0].text.strip() if response.content else ''

    def suggest(
        self,
        source_columns: Sequence[str],
        fields: Sequence[TargetField],
    ) -> List[MappingSuggestion]:
        """
        Get one suggestion per target field.

        Raises:
            MappingSuggestionError: If the provider call fails or the reply is unusable
        """
        if not fields:
            return []

        prompt = build_prompt(source_columns, fields)
        try:
            raw = self._call_ai(prompt)
        except Exception as e:
            message = str(e).lower()
            if '503' in message or 'unavailable' in message or 'overloaded' in message:
                raise MappingSuggestionError(
                    "AI service is overloaded or unavailable. Please try again later."
                ) from e
            raise MappingSuggestionError(
                f"AI call error ({self.ai_provider}): {type(e).__name__}: {e}"
            ) from e

        if not raw:
            raise MappingSuggestionError("AI returned an empty reply")

        data = _extract_json(raw)
        return normalize_suggestions(data['mappings'], source_columns, fields)
