from __future__ import annotations

from dataclasses import dataclass

from cv_builder.config import AutosaveConfig


@dataclass(frozen=True)
class BackoffPolicy:
    """Doubling retry delays, capped, with a consecutive-failure ceiling."""

    base_delay: float = 1.0
    max_delay: float = 30.0
    max_failures: int = 5

    def __post_init__(self) -> None:
        if self.base_delay <= 0:
            raise ValueError(f"base_delay must be > 0, got {self.base_delay}")
        if self.max_delay < self.base_delay:
            raise ValueError(
                f"max_delay ({self.max_delay}) must be >= base_delay ({self.base_delay})"
            )
        if self.max_failures < 1:
            raise ValueError(f"max_failures must be >= 1, got {self.max_failures}")

    @classmethod
    def from_config(cls, config: AutosaveConfig) -> BackoffPolicy:
        return cls(
            base_delay=config.retry_base_delay,
            max_delay=config.retry_max_delay,
            max_failures=config.max_failures,
        )

    def delay_for(self, failures: int) -> float:
        """Delay before the retry that follows the *failures*-th failure."""
        if failures < 1:
            return 0.0
        return min(self.base_delay * 2 ** (failures - 1), self.max_delay)

    def exhausted(self, failures: int) -> bool:
        return failures >= self.max_failures
