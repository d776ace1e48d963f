# apps/ai/parsing.py

"""
Recuperação de JSON das respostas do LLM

Modelos de raciocínio devolvem blocos <think>...</think> e às vezes
embrulham o JSON em cercas markdown ou em texto livre.
"""

import json
import re

THINK_BLOCK = re.compile(r'<think>.*?</think>', re.DOTALL | re.IGNORECASE)
CODE_FENCE = re.compile(r'^```(?:json)?\s*(.*?)\s*```$', re.DOTALL | re.IGNORECASE)
OBJECT_PATTERN = re.compile(r'\{.*\}', re.DOTALL)
ARRAY_PATTERN = re.compile(r'\[.*\]', re.DOTALL)


def strip_markup(text):
    """Remove raciocínio (<think>) e cercas de código"""
    text = THINK_BLOCK.sub('', text or '')

    # Raciocínio sem a tag de abertura: descartar tudo até o último </think>
    closing = text.lower().rfind('</think>')
    if closing != -1:
        text = text[closing + len('</think>'):]

    text = text.strip()
    fence = CODE_FENCE.match(text)
    if fence:
        text = fence.group(1).strip()
    return text


def parse_json_reply(text, expect=None):
    """
    Converte a resposta em objeto Python

    expect=dict ou list restringe o tipo aceito. Retorna None quando
    nada aproveitável é encontrado.
    """
    cleaned = strip_markup(text)

    candidates = [cleaned]
    if expect is None or expect is dict:
        match = OBJECT_PATTERN.search(cleaned)
        if match:
            candidates.append(match.group())
    if expect is None or expect is list:
        match = ARRAY_PATTERN.search(cleaned)
        if match:
            candidates.append(match.group())

    for candidate in candidates:
        try:
            result = json.loads(candidate)
        except ValueError:
            continue
        if expect is None or isinstance(result, expect):
            return result

    return None
