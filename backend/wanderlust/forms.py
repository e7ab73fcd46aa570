"""
Wanderlust Backend — Request Payload Decoding
===============================================

What:  Turns a request body into the nested mapping the validators expect.
Why:   HTML forms post flat keys such as `listing[title]=Cabin`; API clients
       post JSON such as {"listing": {"title": "Cabin"}}. Both must reach
       validation in the same shape.
How:   JSON bodies are decoded as-is. Form bodies (URL-encoded or multipart)
       are parsed by Starlette and their bracketed keys expanded:

           listing[title]=Cabin            → {"listing": {"title": "Cabin"}}
           listing[image][url]=http://...  → {"listing": {"image": {"url": ...}}}
           tags[]=a&tags[]=b               → {"tags": ["a", "b"]}
"""

import json
import re
from typing import Any, Dict, Iterable, List, Tuple

from starlette.requests import Request

from wanderlust.exceptions import ValidationError

_KEY_PATTERN = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")


def split_key(key: str) -> List[str]:
    """
    Split a bracketed form key into its path segments.

    `listing[image][url]` → ["listing", "image", "url"]; `tags[]` → ["tags", ""].
    Keys that do not follow the bracket syntax are returned whole.
    """
    match = _KEY_PATTERN.match(key)
    if not match:
        return [key]
    head, brackets = match.groups()
    return [head] + re.findall(r"\[([^\[\]]*)\]", brackets)


def unflatten(items: Iterable[Tuple[str, Any]]) -> Dict[str, Any]:
    """Build a nested dict from (bracketed key, value) pairs, in order."""
    result: Dict[str, Any] = {}
    for key, value in items:
        parts = split_key(key)
        node: Any = result
        for i, part in enumerate(parts):
            last = i == len(parts) - 1
            if isinstance(node, list):
                # Only `name[]` produces lists; deeper nesting under it is flattened away
                node.append(value)
                break
            if last:
                node[part] = value
                break
            nxt = parts[i + 1]
            child = node.get(part)
            if nxt == "":
                if not isinstance(child, list):
                    child = []
                    node[part] = child
                if i + 1 == len(parts) - 1:
                    child.append(value)
                    break
            elif not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
    return result


async def read_payload(request: Request) -> Dict[str, Any]:
    """
    Decode the request body into a nested mapping.

    Raises:
        ValidationError: the body claims to be JSON but cannot be decoded
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        body = await request.body()
        if not body:
            return {}
        try:
            payload = json.loads(body)
        except ValueError:
            raise ValidationError(message="Request body is not valid JSON")
        return payload if isinstance(payload, dict) else {"value": payload}

    if content_type.startswith(
        ("application/x-www-form-urlencoded", "multipart/form-data")
    ):
        form = await request.form()
        return unflatten(
            (key, value) for key, value in form.multi_items() if isinstance(value, str)
        )

    return {}
