from __future__ import annotations

import json
import logging
import random
from typing import Any, Dict, Optional

from ..core.ports import DecisionLogSink

_TRUNCATED_KEY = "_truncated"


class DecisionLogger(DecisionLogSink):
    """Decision-log sink writing one record per authorization check.

    Records go to the ``accessctl.audit`` logger, either as a JSON line
    (``as_json=True``) or as ``"decision {...}"`` text.

    Options:
      - sample_rate: fraction of decisions to keep, from 0.0 to 1.0.
      - always_log_deny: keep every denial regardless of sampling.
      - max_parameters_bytes: when the JSON form of the action parameters is
        larger, they are replaced by ``{"_truncated": True, "size_bytes": N}``.
    """

    def __init__(
        self,
        sample_rate: float = 1.0,
        level: int = logging.INFO,
        as_json: bool = False,
        *,
        always_log_deny: bool = False,
        max_parameters_bytes: Optional[int] = None,
        logger_name: str = "accessctl.audit",
    ) -> None:
        self.sample_rate = max(0.0, min(1.0, float(sample_rate)))
        self.level = level
        self.as_json = as_json
        self.always_log_deny = always_log_deny
        self.max_parameters_bytes = max_parameters_bytes
        self.logger = logging.getLogger(logger_name)

    def _sampled(self, payload: Dict[str, Any]) -> bool:
        if self.always_log_deny and payload.get("allowed") is False:
            return True
        if self.sample_rate >= 1.0:
            return True
        if self.sample_rate <= 0.0:
            return False
        return random.random() < self.sample_rate

    def _bounded(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        limit = self.max_parameters_bytes
        params = payload.get("parameters")
        if limit is None or params is None:
            return payload
        size = len(json.dumps(params, ensure_ascii=False, default=str).encode("utf-8"))
        if size <= limit:
            return payload
        out = dict(payload)
        out["parameters"] = {_TRUNCATED_KEY: True, "size_bytes": size}
        return out

    def log(self, payload: Dict[str, Any]) -> None:
        if not self._sampled(payload):
            return
        record = self._bounded(payload)
        if self.as_json:
            msg = json.dumps(record, ensure_ascii=False, default=str)
        else:
            msg = f"decision {record}"
        self.logger.log(self.level, msg)


__all__ = ["DecisionLogger"]
