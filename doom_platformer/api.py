# api.py
# Leaderboard client.
#
# Scores are always kept locally first; the server is a bonus. Nothing in
# here raises into the game: failures are logged and reported through
# SubmitResult.

from __future__ import annotations
import logging
import threading
from dataclasses import dataclass
from typing import Callable

import requests

from . import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmitResult:
    ok: bool
    new_high_score: bool = False
    error: str | None = None


class ScoreClient:
    def __init__(self, base_url: str = settings.API_URL, token: str | None = settings.API_TOKEN,
                 timeout: float = settings.API_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        """Without a token we play local-only."""
        return bool(self.token)

    def submit_score(self, score: int, level: int, coins: int) -> SubmitResult:
        if not self.enabled:
            return SubmitResult(ok=False, error="not logged in")

        try:
            resp = requests.post(
                f"{self.base_url}/scores",
                json={"score": int(score), "level": int(level), "coins": int(coins)},
                headers={"Authorization": f"Bearer {self.token}"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as e:
            logger.warning("Score submission failed: %s", e)
            return SubmitResult(ok=False, error=str(e))
        except ValueError as e:
            logger.warning("Score submission returned invalid JSON: %s", e)
            return SubmitResult(ok=False, error="invalid response")

        new_high = bool(data.get("newHighScore") or data.get("isNewHighScore")) if isinstance(data, dict) else False
        logger.info("Score %d submitted (new high score: %s)", score, new_high)
        return SubmitResult(ok=True, new_high_score=new_high)

    def submit_score_async(self, score: int, level: int, coins: int,
                           callback: Callable[[SubmitResult], None] | None = None) -> threading.Thread | None:
        """Fire-and-forget on a daemon thread. Returns the thread, or None when disabled."""
        if not self.enabled:
            logger.debug("No API token, keeping score %d local", score)
            return None

        def worker() -> None:
            result = self.submit_score(score, level, coins)
            if callback is not None:
                try:
                    callback(result)
                except Exception:
                    logger.exception("Score submission callback failed")

        thread = threading.Thread(target=worker, name="score-submit", daemon=True)
        thread.start()
        return thread
