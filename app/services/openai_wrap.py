"""Thin wrappers around the OpenAI Responses HTTP API.

We call the HTTP API directly with `requests` rather than the SDK. Every
helper returns None when no key is configured or the call fails, so the
calling flow (application submission, review) carries on without AI output.
"""
import base64
import json
import random
import re
import time
from typing import Dict, Any, Optional

import requests
from flask import current_app

RESPONSES_URL = 'https://api.openai.com/v1/responses'


def _extract_text(jr) -> str:
    if not isinstance(jr, dict):
        return ''
    text = jr.get('output_text') or ''
    if text:
        return text
    parts = []
    for item in jr.get('output') or []:
        if isinstance(item, dict):
            for c in item.get('content', []):
                if isinstance(c, dict) and 'text' in c:
                    parts.append(c['text'])
                elif isinstance(c, str):
                    parts.append(c)
        elif isinstance(item, str):
            parts.append(item)
    return '\n'.join(parts)


def _post_responses(body: Dict[str, Any], max_attempts: int = 4) -> Optional[dict]:
    """POST to the Responses API with retry on 429/5xx and network errors."""
    api_key = current_app.config.get('OPENAI_API_KEY')
    if not api_key:
        current_app.logger.info('OPENAI_API_KEY not set, skipping OpenAI call')
        return None
    headers = {'Authorization': f'Bearer {api_key}', 'Content-Type': 'application/json'}

    backoff = 1.0
    for attempt in range(1, max_attempts + 1):
        try:
            r = requests.post(RESPONSES_URL, headers=headers, json=body, timeout=60)
        except requests.exceptions.RequestException:
            current_app.logger.warning('OpenAI network error, attempt %s/%s', attempt, max_attempts)
            time.sleep(backoff + random.uniform(0, 0.5))
            backoff *= 2
            continue

        if r.status_code == 429 or 500 <= r.status_code < 600:
            body_text = r.text or ''
            if 'insufficient_quota' in body_text:
                current_app.logger.error('OpenAI quota exhausted; body=%s', body_text[:1000])
                return None
            ra = r.headers.get('Retry-After')
            try:
                wait = float(ra) if ra else backoff
            except ValueError:
                wait = backoff
            current_app.logger.warning('OpenAI returned %s, attempt %s/%s, retrying in %ss',
                                       r.status_code, attempt, max_attempts, wait)
            time.sleep(wait + random.uniform(0, 0.5))
            backoff *= 2
            continue

        if r.status_code >= 400:
            current_app.logger.error('OpenAI HTTP error %s: %s', r.status_code, (r.text or '')[:1000])
            return None
        try:
            return r.json()
        except ValueError:
            current_app.logger.exception('OpenAI response was not JSON')
            return None

    current_app.logger.warning('OpenAI Responses returned no data after retries')
    return None


def summarize_resume(data: bytes, mimetype: str = 'application/pdf', filename: str = 'resume.pdf') -> Optional[str]:
    """Return a short plain-text summary of a resume, or None."""
    if not data:
        return None
    data_uri = f"data:{mimetype or 'application/pdf'};base64,{base64.b64encode(data).decode('ascii')}"
    body = {
        'model': current_app.config.get('OPENAI_MODEL', 'gpt-4o-mini'),
        'input': [{
            'role': 'user',
            'content': [
                {'type': 'input_text', 'text': (
                    'Summarize this student resume for a club hiring panel in at most 120 words. '
                    'Cover skills, projects, experience and achievements. Plain text only.')},
                {'type': 'input_file', 'filename': filename or 'resume.pdf', 'file_data': data_uri},
            ],
        }],
        'max_output_tokens': 400,
        'temperature': 0.2,
    }
    jr = _post_responses(body)
    if jr is None:
        return None
    summary = _extract_text(jr).strip()
    return summary or None


def evaluate_candidate(resume_summary: str, transcript: str) -> Optional[Dict[str, Any]]:
    """Ask the model for ratings (0-5) and remarks.

    Returns {'ratings': {...}, 'remarks': str} or None. The model's own
    overall value is dropped; callers derive it from the sub-ratings.
    """
    prompt = "\n".join([
        "You are an expert technical recruiter for a student tech club.",
        "Evaluate the candidate from the resume summary and interview transcript.",
        "Return only a JSON object with keys: ratings (communication, technical, problem_solving, team_fit;",
        "decimals from 0.0 to 5.0) and remarks (a concise justification).",
        "--",
        "Resume summary:",
        resume_summary or "(none)",
        "--",
        "Interview transcript:",
        transcript or "",
    ])
    body = {
        'model': current_app.config.get('OPENAI_MODEL', 'gpt-4o-mini'),
        'input': prompt,
        'max_output_tokens': 600,
        'temperature': 0.3,
    }
    jr = _post_responses(body)
    if jr is None:
        return None

    text = _extract_text(jr)
    m = re.search(r"\{[\s\S]*\}", text)
    try:
        data = json.loads(m.group(0) if m else text)
    except (ValueError, TypeError):
        current_app.logger.warning('OpenAI evaluation was not valid JSON: %s', text[:500])
        return None

    if not isinstance(data, dict) or not isinstance(data.get('ratings'), dict):
        current_app.logger.warning('OpenAI evaluation had no ratings object: %s', text[:500])
        return None

    raw = data['ratings']
    ratings = {}
    for key in ('communication', 'technical', 'problem_solving', 'team_fit'):
        try:
            ratings[key] = max(0.0, min(5.0, float(raw.get(key, 0) or 0)))
        except (TypeError, ValueError):
            ratings[key] = 0.0
    return {'ratings': ratings, 'remarks': str(data.get('remarks') or '')}
