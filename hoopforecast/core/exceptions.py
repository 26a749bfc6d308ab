"""
Error taxonomy for the prediction and reconciliation engine.

Fatal kinds abort a comparison and are surfaced to the caller as a single
``{"error": kind, "detail": message}`` object. Transport failures carry the
name of the adapter that produced them.
"""
from typing import Any, Dict, Optional


class HoopForecastError(Exception):
    """Base class for all engine errors."""

    kind = "HoopForecastError"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind, "detail": self.message}


class PlayerNotFound(HoopForecastError):
    """No upstream identity matched the player reference."""

    kind = "PlayerNotFound"
    status_code = 404

    def __init__(self, player_ref: str, message: Optional[str] = None):
        super().__init__(message or f'Player "{player_ref}" not found')
        self.player_ref = player_ref


class InsufficientHistory(HoopForecastError):
    """Fewer usable games than the predictor requires."""

    kind = "InsufficientHistory"
    status_code = 422

    def __init__(self, count: int, required: int = 3):
        super().__init__(
            f"Insufficient game data for prediction: {count} game(s) available, need at least {required}"
        )
        self.count = count
        self.required = required

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["games_available"] = self.count
        data["games_required"] = self.required
        return data


class MarketDataUnavailable(HoopForecastError):
    """
    No usable betting line for the player.

    ``reason`` is one of:
    - ``no_line``: the provider answered but carries no matching market
    - ``unreachable``: transport failure or timeout talking to the provider
    - ``invalid_payload``: the provider answered with an unexpected shape
    - ``not_configured``: no API key and no filler line configured
    """

    kind = "MarketDataUnavailable"
    status_code = 503

    NO_LINE = "no_line"
    UNREACHABLE = "unreachable"
    INVALID_PAYLOAD = "invalid_payload"
    NOT_CONFIGURED = "not_configured"

    def __init__(self, reason: str, cause: str):
        super().__init__(f"Market line unavailable ({reason}): {cause}")
        self.reason = reason
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["reason"] = self.reason
        return data


class UpstreamTransportError(HoopForecastError):
    """Timeout, network or HTTP status failure from an upstream adapter."""

    kind = "UpstreamTransportError"
    status_code = 502

    def __init__(
        self,
        adapter: str,
        cause: str,
        timed_out: bool = False,
        status: Optional[int] = None
    ):
        super().__init__(f"[{adapter}] {cause}")
        self.adapter = adapter
        self.cause = cause
        self.timed_out = timed_out
        self.status = status

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["adapter"] = self.adapter
        return data


class ParseError(UpstreamTransportError):
    """Malformed or unexpected upstream payload shape."""

    kind = "ParseError"

    def __init__(self, adapter: str, cause: str):
        super().__init__(adapter, f"unexpected payload: {cause}")
