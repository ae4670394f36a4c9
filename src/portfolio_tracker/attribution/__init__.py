"""Performance attribution package."""

from .brinson import AttributionDetail, AttributionResult, attribution

__all__ = ["AttributionDetail", "AttributionResult", "attribution"]
