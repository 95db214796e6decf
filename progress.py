"""One-time bonus bookkeeping shared by the goal and challenge trackers."""

import os


# ---- Reward amounts ----
GOAL_CREATED_POINTS = int(os.getenv("GOAL_CREATED_POINTS", "10"))
GOAL_ACHIEVED_POINTS = int(os.getenv("GOAL_ACHIEVED_POINTS", "100"))
CHALLENGE_COMPLETED_POINTS = int(os.getenv("CHALLENGE_COMPLETED_POINTS", "50"))
BADGE_AWARD_POINTS = int(os.getenv("BADGE_AWARD_POINTS", "10"))


def fires_once(was_true: bool, is_now_true: bool) -> bool:
    """True only on the false -> true edge of a one-way completion flag.

    Once the flag is set it stays set, so repeated calls never fire again.
    """
    return (not was_true) and bool(is_now_true)
