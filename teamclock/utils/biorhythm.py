"""Biorhythm cycles derived from a stored birth date and time"""
import math
from datetime import datetime
from typing import Dict, Optional

CYCLES = {
    'physical': 23,
    'emotional': 28,
    'intellectual': 33,
}


def calculate_biorhythm(date_of_birth: str, time_of_birth: str,
                        now: Optional[datetime] = None) -> Dict[str, float]:
    """Return each cycle as a value between -100 and 100"""
    birth = datetime.fromisoformat(f"{date_of_birth}T{time_of_birth}")
    now = (now or datetime.now()).replace(tzinfo=None)
    days_since_birth = math.floor((now - birth).total_seconds() / 86400)

    return {
        name: math.sin(2 * math.pi * days_since_birth / length) * 100
        for name, length in CYCLES.items()
    }


def get_biorhythm_phase(value: float) -> str:
    if value > 90:
        return 'Peak'
    if value > 30:
        return 'High'
    if value > -30:
        return 'Transition'
    if value > -90:
        return 'Low'
    return 'Critical'
