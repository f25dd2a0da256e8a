"""Parsing of free-form model output.

Models are asked for bare JSON or bare Mermaid, but replies still arrive
wrapped in prose or markdown fences. Everything here treats the model as an
untrusted producer: extraction is permissive, validation is strict, and
failures surface as ``MalformedArtifactError``.
"""

import json
import re
from typing import Any, Optional

from pydantic import ValidationError

from .errors import MalformedArtifactError
from .models import DesignArtifact, Graph

_FENCE_RE = re.compile(r"```[\w+-]*[ \t]*\n?(.*?)\n?\s*```", re.DOTALL)
_OPEN_FENCE_RE = re.compile(r"^```[\w+-]*[ \t]*\n?")


def strip_code_fences(text: str) -> str:
    """Strip markdown code fences from model output if present."""
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    # Truncated replies can open a fence without closing it
    return _OPEN_FENCE_RE.sub("", text.strip()).strip()


def _balanced_span(text: str, start: int) -> Optional[str]:
    """Return the brace-balanced span starting at ``text[start]``, if closed."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def extract_json_object(text: str) -> dict[str, Any]:
    """Find and decode the first top-level JSON object in ``text``.

    Raises:
        MalformedArtifactError: if no brace-delimited span decodes to an object.
    """
    if not text or not text.strip():
        raise MalformedArtifactError("model returned an empty response", raw_text=text)

    stripped = text.strip()
    try:
        data = json.loads(stripped)
        if isinstance(data, dict):
            return data
    except json.JSONDecodeError:
        pass

    start = stripped.find("{")
    while start != -1:
        span = _balanced_span(stripped, start)
        if span is None:
            # Unclosed brace: the reply was cut off, and anything after it is nested
            break
        try:
            data = json.loads(span)
        except json.JSONDecodeError:
            data = None
        if isinstance(data, dict):
            return data
        start = stripped.find("{", start + len(span))

    raise MalformedArtifactError("no JSON object found in model response", raw_text=text)


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "<root>"
    return f"{location}: {first['msg']}"


def parse_graph(text: str) -> Graph:
    """Parse a graph JSON object out of a model reply."""
    data = extract_json_object(text)
    # Some replies nest the graph the same way a design artifact does
    if "nodes" not in data and isinstance(data.get("flowData"), dict):
        data = data["flowData"]
    try:
        return Graph.model_validate(data)
    except ValidationError as e:
        raise MalformedArtifactError(f"invalid graph: {_describe(e)}", raw_text=text) from e


def parse_design_artifact(text: str) -> DesignArtifact:
    """Parse a design artifact JSON object out of a model reply."""
    data = extract_json_object(text)
    try:
        return DesignArtifact.model_validate(data)
    except ValidationError as e:
        raise MalformedArtifactError(
            f"invalid design artifact: {_describe(e)}", raw_text=text
        ) from e
