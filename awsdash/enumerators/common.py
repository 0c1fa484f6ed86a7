from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional

from starlette.concurrency import run_in_threadpool


async def call(fn: Callable[..., Dict[str, Any]], **kwargs: Any) -> Dict[str, Any]:
    """Run one blocking boto3 call off the event loop."""
    return await run_in_threadpool(fn, **kwargs) or {}


def region_from_arn(arn: Optional[str]) -> Optional[str]:
    # arn:partition:service:region:account:resource
    parts = (arn or '').split(':')
    if len(parts) < 4:
        return None
    return parts[3] or None


def region_from_az(az: Optional[str]) -> Optional[str]:
    # us-east-1a -> us-east-1
    if not az:
        return None
    return az[:-1] or None


def name_from_tags(tags: Optional[List[Dict[str, Any]]], fallback: str) -> str:
    for t in tags or []:
        if t.get('Key') == 'Name' and t.get('Value'):
            return t['Value']
    return fallback


def matches(query: str, *values: Optional[str]) -> bool:
    """Case-insensitive substring test; `query` is expected lower-cased already."""
    return any(v is not None and query in v.lower() for v in values)


def tag_values(tags: Optional[Iterable[Dict[str, Any]]]) -> List[Optional[str]]:
    return [t.get('Value') for t in tags or []]
