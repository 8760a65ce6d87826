"""Output strategies turning harvest records into documents."""

from .base_strategy import OutputStrategy
from .wix_strategy import WixOutputStrategy

__all__ = ["OutputStrategy", "WixOutputStrategy"]
