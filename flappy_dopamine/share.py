"""Share links for a finished run."""

from __future__ import annotations

from urllib.parse import quote

SHARE_ENDPOINT = "https://twitter.com/intent/tweet"


def share_message(name: str, score: int, best: int) -> str:
    return f"{name} - Flappy Dopamine score: {score}. Personal best: {best}."


def build_share_url(name: str, score: int, best: int, origin: str | None = None) -> str:
    url = f"{SHARE_ENDPOINT}?text={quote(share_message(name, score, best), safe='')}"
    if origin:
        url += f"&url={quote(origin, safe='')}"
    return url
