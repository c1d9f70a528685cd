"""
AI Monitor - logging and in-memory metrics for classifier calls.

Every provider response the classifier receives goes through
track_response(), which writes one structured log line and updates the
aggregated counters served by GET /assistant/stats.

Usage:
    monitor = AIMonitor()
    monitor.track_response(request_id="abc123", response=ai_response)
    monitor.get_stats()
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, List, Optional

from alfred.ai.providers.base import AIResponse

logger = logging.getLogger("alfred.ai.monitor")


# ---------------------------------------------------------------------------
# METRICS DATA CLASSES
# ---------------------------------------------------------------------------
@dataclass
class RequestMetrics:
    """Metrics for a single classifier call."""
    request_id: str
    provider: str
    model: str
    prompt_tokens: int
    completion_tokens: int
    latency_ms: float
    success: bool
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


@dataclass
class AggregatedMetrics:
    """Counters over every call tracked since startup."""
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    total_tokens: int = 0
    total_latency_ms: float = 0.0
    requests_by_provider: Dict[str, int] = field(default_factory=dict)

    @property
    def avg_latency_ms(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return self.total_latency_ms / self.total_requests

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_requests": self.total_requests,
            "successful_requests": self.successful_requests,
            "failed_requests": self.failed_requests,
            "total_tokens": self.total_tokens,
            "avg_latency_ms": round(self.avg_latency_ms, 2),
            "requests_by_provider": dict(self.requests_by_provider),
        }


# ---------------------------------------------------------------------------
# AI MONITOR
# ---------------------------------------------------------------------------
class AIMonitor:
    """Structured logs plus aggregated metrics for provider calls."""

    def __init__(self, max_history: int = 1000):
        self._history: List[RequestMetrics] = []
        self._max_history = max_history
        self._lock = Lock()
        self._aggregated = AggregatedMetrics()

    def track_response(
        self,
        request_id: str,
        response: AIResponse,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Record one provider response (log + metrics)."""
        provider = response.provider.value if hasattr(response.provider, "value") else str(response.provider)

        metrics = RequestMetrics(
            request_id=request_id,
            provider=provider,
            model=response.model,
            prompt_tokens=response.usage.prompt_tokens if response.usage else 0,
            completion_tokens=response.usage.completion_tokens if response.usage else 0,
            latency_ms=response.latency_ms,
            success=response.success,
        )

        with self._lock:
            self._history.append(metrics)
            if len(self._history) > self._max_history:
                self._history = self._history[-self._max_history:]
            self._update_aggregated(metrics)

        log_data = {
            "event": "ai_response",
            "request_id": request_id,
            "provider": provider,
            "model": response.model,
            "success": response.success,
            "latency_ms": round(response.latency_ms, 2),
            "tokens": metrics.total_tokens,
            "timestamp": metrics.timestamp.isoformat(),
        }
        if response.error:
            log_data["error"] = response.error
        if metadata:
            log_data["metadata"] = metadata

        level = logging.INFO if response.success else logging.WARNING
        logger.log(level, f"AI Response: {json.dumps(log_data, ensure_ascii=False)}")

    def _update_aggregated(self, metrics: RequestMetrics) -> None:
        agg = self._aggregated
        agg.total_requests += 1
        if metrics.success:
            agg.successful_requests += 1
        else:
            agg.failed_requests += 1
        agg.total_tokens += metrics.total_tokens
        agg.total_latency_ms += metrics.latency_ms
        agg.requests_by_provider[metrics.provider] = agg.requests_by_provider.get(metrics.provider, 0) + 1

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return self._aggregated.to_dict()

    def get_recent(self, limit: int = 10) -> List[RequestMetrics]:
        with self._lock:
            return list(self._history[-limit:])

    def reset(self) -> None:
        with self._lock:
            self._history.clear()
            self._aggregated = AggregatedMetrics()
