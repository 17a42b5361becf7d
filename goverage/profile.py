"""Processing a coverage profile file into a report."""

from __future__ import annotations

import os

from goverage.cover import ProfileParseError, parse_profiles
from goverage.report.strategy import HTMLStrategy


def process_profile(profile_file: str | os.PathLike, output_dir: str) -> float:
    """Build the HTML report for ``profile_file`` and return its coverage percentage.

    A profile that cannot be read or parsed is reported and counts as 0.
    """
    try:
        profiles = parse_profiles(profile_file)
    except (OSError, ProfileParseError) as exc:
        print(f"Error parsing cover profile: {exc}")
        return 0.0
    return HTMLStrategy().execute(profiles, output_dir)