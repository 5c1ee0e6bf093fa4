from __future__ import annotations

DEFAULT_KEYWORDS: tuple[str, ...] = (
    "sleep",
    "fatigue",
    "overnight",
    "circadian",
    "shiftwork",
    "drowsy",
    "clock",
    "nighttime",
    "napping",
    "dream",
    "unconscious",
    "bodyclock",
    "sleepwake",
    "24hour",
    "sleepy",
    "alert",
    "shiftworker",
    "clocks",
    "insomnia",
    "cbti",
    "cbt-i",
    "apnoea",
    "osa",
    "chronotype",
    "apnea",
    "sleepiness",
    "undermattress",
    "apnoeahypopnoea",
    "vigilance",
    "asleep",
    "narcolepsy",
    "cataplexy",
)
