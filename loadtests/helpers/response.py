"""Turn Marketstream API error bodies into one-line failure messages.

Three body shapes reach a load test:

- request validation (422): {"detail": [{"loc": [...], "msg": "..."}]}
- gateway identity errors (401): {"detail": "Missing resolved identity"}
- domain error kinds (400/403/404/409/503): {"error": {"field": ["msg", ...]}}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response

MAX_DETAIL = 300


def _join(messages) -> str:
    if isinstance(messages, list):
        return "; ".join(str(m) for m in messages)
    return str(messages)


def extract_error_detail(response: Response) -> str:
    try:
        body = response.json()
    except ValueError:
        text = getattr(response, "text", "") or ""
        return text[:MAX_DETAIL] or "(empty response body)"

    if not isinstance(body, dict):
        return str(body)[:MAX_DETAIL]

    error = body.get("error")
    if isinstance(error, dict):
        return " | ".join(f"{field}: {_join(msgs)}" for field, msgs in error.items())
    if error is not None:
        return str(error)

    detail = body.get("detail")
    if isinstance(detail, list):
        return " | ".join(
            f"{'.'.join(str(p) for p in err.get('loc', []))}: {err.get('msg', err)}" for err in detail
        )
    if detail is not None:
        return str(detail)

    return str(body)[:MAX_DETAIL]
