"""
Error taxonomy for the animation layer

Nothing here is ever raised to page-assembly code during normal operation:
components catch these at their boundary, log them, and degrade to a no-op
or to the DISABLED behaviour.
"""

from typing import Optional


class MotionError(Exception):
    """Base class for animation-layer errors"""
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class HostCapabilityError(MotionError):
    """Host lacks a primitive the engine needs (intersection, frames)"""
    def __init__(self, capability: str):
        super().__init__(
            code="HOST_CAPABILITY_MISSING",
            message=f"Host does not provide '{capability}'",
            details={"capability": capability}
        )


class ConfigError(MotionError):
    """Configuration file cannot be read or parsed"""
    def __init__(self, path: str, reason: str):
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Cannot load config '{path}': {reason}",
            details={"path": path, "reason": reason}
        )
