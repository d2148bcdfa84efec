#!/usr/bin/env python3
"""
Platform names shared by the reformatter, the pipeline and distribution.
"""

# Targets the reformatter knows how to write for
REFORMAT_PLATFORMS = [
    "linkedin",
    "tiktok",
    "newsletter",
    "seo",
    "press-release",
    "twitter",
    "instagram",
]

# Used by /api/process/start when the request names no platforms
DEFAULT_PROCESS_PLATFORMS = REFORMAT_PLATFORMS[:5]

PLATFORM_CATALOG = [
    {"id": "linkedin", "name": "LinkedIn", "icon": "linkedin", "max_length": 3000},
    {"id": "twitter", "name": "X (Twitter)", "icon": "twitter", "max_length": 280},
    {"id": "facebook", "name": "Facebook", "icon": "facebook", "max_length": 63206},
    {"id": "instagram", "name": "Instagram", "icon": "instagram", "max_length": 2200},
    {"id": "newsletter", "name": "Newsletter", "icon": "mail", "max_length": None},
]
