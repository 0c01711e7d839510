"""Thin wrapper around the OpenAI Responses HTTP API for rubric scoring.

We call the HTTP API with `requests` instead of the `openai` SDK so the
request/response handling stays in one place. Every public function here
degrades to a fallback result instead of raising: an AI outage must leave
the evaluation in a state a reviewer can finish by hand.
"""

import json
import random
import re
import time
from typing import Any, Dict, List

import requests
from flask import current_app

from .rubric import CATEGORY_INFO, rubric_text
from .scoring import Category

RESPONSES_URL = 'https://api.openai.com/v1/responses'

FALLBACK_SCORE = 50.0
FALLBACK_CONFIDENCE = 0.3
FALLBACK_ANALYSIS = {
    'fortalezas': ['Análisis automático no disponible'],
    'debilidades': ['Se requiere revisión manual'],
    'observaciones': ['Evaluación en proceso'],
    'recomendaciones': ['Revisar manualmente los criterios'],
}


class AIUnavailable(Exception):
    """The provider could not produce a usable answer."""


def _sleep(seconds):
    time.sleep(seconds)


def _retry_wait(resp, backoff):
    ra = resp.headers.get('Retry-After') if resp is not None else None
    if ra:
        try:
            return float(ra)
        except ValueError:
            # Retry-After may be an HTTP-date; use our own backoff then
            pass
    return backoff


def _post_responses(prompt: str, max_output_tokens: int = 600) -> Dict[str, Any]:
    """POST a prompt to the Responses API, retrying rate limits and transient errors."""
    api_key = current_app.config.get('OPENAI_API_KEY')
    if not api_key:
        raise AIUnavailable('OPENAI_API_KEY not configured')

    headers = {'Authorization': f'Bearer {api_key}', 'Content-Type': 'application/json'}
    body = {
        'model': current_app.config.get('OPENAI_MODEL', 'gpt-4o-mini'),
        'input': prompt,
        'max_output_tokens': max_output_tokens,
        'temperature': 0.3,
    }
    max_attempts = max(1, int(current_app.config.get('OPENAI_MAX_ATTEMPTS', 6)))
    backoff = 1.0
    for attempt in range(1, max_attempts + 1):
        last = attempt == max_attempts
        try:
            r = requests.post(RESPONSES_URL, headers=headers, json=body, timeout=30)
        except requests.exceptions.RequestException:
            current_app.logger.warning('OpenAI network error, attempt %s/%s', attempt, max_attempts)
            if last:
                break
            _sleep(backoff + random.uniform(0, 0.5))
            backoff *= 2
            continue

        if r.status_code == 429 or 500 <= r.status_code < 600:
            body_text = r.text or ''
            if r.status_code == 429 and 'quota' in body_text.lower():
                current_app.logger.error('OpenAI 429 indicates insufficient quota; body=%s', body_text[:2000])
                break
            wait = _retry_wait(r, backoff)
            current_app.logger.warning('OpenAI request returned %s, attempt %s/%s, retrying in %ss',
                                       r.status_code, attempt, max_attempts, wait)
            if last:
                break
            _sleep(wait + random.uniform(0, 0.5))
            backoff *= 2
            continue

        if r.status_code >= 400:
            current_app.logger.error('OpenAI HTTP error %s: %s', r.status_code, (r.text or '')[:1000])
            raise AIUnavailable(f'OpenAI HTTP {r.status_code}')
        try:
            return r.json()
        except ValueError as e:
            raise AIUnavailable('OpenAI response is not JSON') from e

    raise AIUnavailable('OpenAI Responses returned no data after retries')


def _extract_text(jr: Dict[str, Any]) -> str:
    text = jr.get('output_text') or ''
    if text:
        return text
    parts = []
    for item in jr.get('output') or jr.get('results') or []:
        if isinstance(item, dict):
            for c in item.get('content', []):
                if isinstance(c, dict) and 'text' in c:
                    parts.append(c['text'])
                elif isinstance(c, str):
                    parts.append(c)
        elif isinstance(item, str):
            parts.append(item)
    return '\n'.join(parts)


def _extract_json(text: str) -> Dict[str, Any]:
    m = re.search(r"\{[\s\S]*\}", text or '')
    if not m:
        raise AIUnavailable('no JSON object in model output')
    try:
        data = json.loads(m.group(0))
    except json.JSONDecodeError as e:
        raise AIUnavailable(f'invalid JSON in model output: {e}') from e
    if not isinstance(data, dict):
        raise AIUnavailable('model output JSON is not an object')
    return data


def _clamp(value, lo, hi):
    return max(lo, min(hi, float(value)))


def build_category_prompt(category: Category, items: List[Dict[str, Any]]) -> str:
    info = CATEGORY_INFO[category]
    lines = [
        f'Evalúa la startup en "{info["nombre"]}" ({info["descripcion"]}).',
        f'Excelencia: {info["excelencia"]}',
        '--',
        'RÚBRICA:',
        rubric_text(category),
        '--',
        'Respuestas:',
    ]
    for it in sorted(items, key=lambda x: x.get('order', 0)):
        lines.append(f'[id={it["criterion_id"]}] Pregunta: {it["prompt"]}')
        lines.append(f'Respuesta: {it.get("text") or "(sin respuesta)"}')
    lines += [
        '--',
        'Para cada id asigna puntuacion (0-100, equivalente a nivel 1-4 de la rúbrica), '
        'confianza (0-1), justificacion breve y recomendaciones.',
        'RESPONDE SOLO CON JSON:',
        '{"criterios": [{"id": 1, "puntuacion": 75, "confianza": 0.85, '
        '"justificacion": "...", "recomendaciones": "..."}]}',
    ]
    return '\n'.join(lines)


def _fallback_scores(items, reason):
    return [{
        'criterion_id': it['criterion_id'],
        'score': FALLBACK_SCORE,
        'confidence': FALLBACK_CONFIDENCE,
        'justification': f'Evaluación automática no disponible: {reason}. Se requiere revisión manual.',
        'recommendations': '',
    } for it in items]


def parse_category_scores(data: Dict[str, Any], items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Map the model JSON onto the requested criteria; unanswered ids get the fallback."""
    by_id = {}
    for entry in data.get('criterios') or []:
        if isinstance(entry, dict) and 'id' in entry:
            by_id[str(entry['id'])] = entry

    out = []
    for it in items:
        entry = by_id.get(str(it['criterion_id']))
        if entry is None:
            out += _fallback_scores([it], 'criterio sin puntuación')
            continue
        try:
            if entry.get('puntuacion') is not None:
                score = _clamp(entry['puntuacion'], 0, 100)
            else:
                score = _clamp(float(entry['nivel']) * 25, 0, 100)
            confidence = _clamp(entry.get('confianza', 0.5), 0, 1)
        except (KeyError, TypeError, ValueError):
            out += _fallback_scores([it], 'puntuación inválida')
            continue
        out.append({
            'criterion_id': it['criterion_id'],
            'score': round(score, 2),
            'confidence': round(confidence, 3),
            'justification': entry.get('justificacion') or 'Evaluación automática',
            'recommendations': entry.get('recomendaciones') or '',
        })
    return out


def score_category(category, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Ask the model to score one category's answers on 0-100.

    items: [{criterion_id, prompt, text, order}]. Returns one dict per item with
    score, confidence, justification and recommendations.
    """
    category = Category.parse(category)
    if not items:
        return []
    try:
        jr = _post_responses(build_category_prompt(category, items), max_output_tokens=800)
        data = _extract_json(_extract_text(jr))
    except AIUnavailable as e:
        current_app.logger.warning('AI scoring for %s unavailable: %s', category.value, e)
        return _fallback_scores(items, str(e))
    return parse_category_scores(data, items)


def gen_analysis(per_category: Dict[str, float], total: float) -> Dict[str, List[str]]:
    """Overall strengths/weaknesses summary for an evaluated applicant."""
    lines = ['Evaluaciones por categoría:']
    lines += [f'- {k}: {v}/100' for k, v in per_category.items()]
    lines += [f'Puntaje total: {total}/100', '',
              'Genera un análisis conciso. RESPONDE SOLO CON JSON:',
              '{"fortalezas": ["..."], "debilidades": ["..."], '
              '"observaciones": ["..."], "recomendaciones": ["..."]}']
    try:
        jr = _post_responses('\n'.join(lines), max_output_tokens=400)
        data = _extract_json(_extract_text(jr))
    except AIUnavailable as e:
        current_app.logger.warning('AI analysis unavailable: %s', e)
        return dict(FALLBACK_ANALYSIS)
    return {k: [str(x) for x in (data.get(k) or [])] for k in FALLBACK_ANALYSIS}
