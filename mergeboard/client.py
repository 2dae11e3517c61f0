"""Async HTTP client for the scores API."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

SCORES_PATH = "/scores"
LEADERBOARD_PATH = "/leaderboard"


class ClientError(Exception):
    """Raised with a message suitable for showing to the player."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _opt_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


def _opt_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


@dataclass
class ScoreRecord:
    id: str
    user_id: str
    display_name: Optional[str]
    score: int
    max_tier_reached: Optional[int]
    pieces_merged: Optional[int]
    game_duration_seconds: Optional[int]
    created_at: str

    @classmethod
    def from_payload(cls, data: Dict[str, Any], fallback_score: int = 0) -> "ScoreRecord":
        score = _opt_int(data.get("score"))
        return cls(
            id=str(data.get("id") or ""),
            user_id=str(data.get("userId") or ""),
            display_name=_opt_str(data.get("displayName")),
            score=fallback_score if score is None else score,
            max_tier_reached=_opt_int(data.get("maxTierReached")),
            pieces_merged=_opt_int(data.get("piecesMerged")),
            game_duration_seconds=_opt_int(data.get("gameDurationSeconds")),
            created_at=_opt_str(data.get("createdAt")) or "",
        )


@dataclass
class LeaderboardEntry(ScoreRecord):
    rank: int = 0

    @classmethod
    def from_payload(cls, data: Dict[str, Any], fallback_score: int = 0) -> "LeaderboardEntry":
        base = ScoreRecord.from_payload(data, fallback_score)
        return cls(rank=int(data.get("rank") or 0), **base.__dict__)


@dataclass
class SubmitScoreResult:
    placement: int
    entry: ScoreRecord


class MergeboardClient:
    """Thin wrapper over the public endpoints.

    Pass ``http`` to reuse a configured :class:`httpx.AsyncClient` (custom
    transport, base URL, timeouts); otherwise one is built from ``base_url``.
    """

    def __init__(
        self,
        base_url: str = "",
        *,
        http: Optional[httpx.AsyncClient] = None,
        timeout: float = 20,
    ) -> None:
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "MergeboardClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def submit_score(
        self,
        nickname: str,
        score: float,
        *,
        email: Optional[str] = None,
        max_tier_reached: Optional[int] = None,
        pieces_merged: Optional[int] = None,
        game_duration_seconds: Optional[int] = None,
    ) -> SubmitScoreResult:
        nickname = (nickname or "").strip()
        if not nickname:
            raise ClientError("Nickname is required")
        if not isinstance(score, (int, float)) or not math.isfinite(score):
            raise ClientError("Score is missing")

        body: Dict[str, Any] = {"nickname": nickname, "score": score}
        email = (email or "").strip()
        if email:
            body["email"] = email
        for key, value in (
            ("maxTierReached", max_tier_reached),
            ("piecesMerged", pieces_merged),
            ("gameDurationSeconds", game_duration_seconds),
        ):
            if value is not None:
                body[key] = value

        try:
            response = await self._http.post(
                SCORES_PATH, json=body, headers={"Accept": "application/json"}
            )
        except httpx.TransportError as exc:
            raise ClientError("Unable to reach score service") from exc

        payload = self._json(response, "Score service returned an invalid response")
        if not isinstance(payload, dict):
            raise ClientError("Score service returned an invalid response", response.status_code)
        if response.is_error:
            server_message = _opt_str(payload.get("error"))
            if response.status_code == 400:
                fallback = "Please check your nickname and try again"
            elif response.status_code == 503:
                fallback = "Score service is temporarily unavailable"
            else:
                fallback = "Failed to submit score"
            raise ClientError(server_message or fallback, response.status_code)

        entry = ScoreRecord.from_payload(payload.get("entry") or {}, fallback_score=int(score))
        return SubmitScoreResult(placement=int(payload.get("placement") or 0), entry=entry)

    async def fetch_leaderboard(self, limit: Optional[int] = None) -> List[LeaderboardEntry]:
        params = {"limit": str(limit)} if limit else None
        try:
            response = await self._http.get(
                LEADERBOARD_PATH, params=params, headers={"Accept": "application/json"}
            )
        except httpx.TransportError as exc:
            raise ClientError("Unable to reach leaderboard service") from exc

        payload = self._json(response, "Received an invalid leaderboard response")
        if response.is_error:
            server_message = _opt_str(payload.get("error")) if isinstance(payload, dict) else None
            raise ClientError(server_message or "Failed to load leaderboard", response.status_code)

        entries = payload.get("entries") if isinstance(payload, dict) else None
        if not isinstance(entries, list):
            return []
        return [LeaderboardEntry.from_payload(item) for item in entries if isinstance(item, dict)]

    @staticmethod
    def _json(response: httpx.Response, message: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise ClientError(message, response.status_code) from exc


__all__ = [
    "ClientError",
    "LeaderboardEntry",
    "MergeboardClient",
    "ScoreRecord",
    "SubmitScoreResult",
]
