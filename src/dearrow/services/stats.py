from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class RuntimeStats:
    started_at: float = field(default_factory=time.time)
    events_seen: int = 0
    replacements_posted: int = 0
    embeds_suppressed: int = 0
    fetch_failures: int = 0
    post_failures: int = 0
    suppress_failures: int = 0

    def uptime_seconds(self) -> int:
        return int(time.time() - self.started_at)

    def summary(self) -> str:
        return (
            f"uptime={self.uptime_seconds()}s events={self.events_seen} "
            f"posted={self.replacements_posted} suppressed={self.embeds_suppressed} "
            f"fetch_failures={self.fetch_failures} post_failures={self.post_failures} "
            f"suppress_failures={self.suppress_failures}"
        )
