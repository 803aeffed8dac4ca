"""Application identifier classifier.

Maps Microsoft application identifiers (as they appear in AutoUpdate logs,
e.g. ``MSau04`` or ``XCEL2019``) onto a closed set of known applications.
"""

from enum import Enum


class AppTag(str, Enum):
    TEAMS = "Teams"
    OUTLOOK = "Outlook"
    ONEDRIVE = "OneDrive"
    COMPANY_PORTAL = "Company Portal"
    WORD = "Word"
    EXCEL = "Excel"
    POWERPOINT = "PowerPoint"
    ONENOTE = "OneNote"
    COPILOT = "Microsoft Copilot"
    DEFENDER = "Microsoft Defender"
    QUICK_ASSIST = "Quick Assist"
    REMOTE_HELP = "Remote Help"
    SKYPE = "Skype for Business"
    WINDOWS_APP = "Windows App"
    MAU = "MAU"
    OTHER = "Other"


# Ordered; first match wins.
APP_IDENTIFIERS: tuple[tuple[str, AppTag], ...] = (
    ("teams21", AppTag.TEAMS),
    ("teams10", AppTag.TEAMS),
    ("opim2019", AppTag.OUTLOOK),
    ("ondr18", AppTag.ONEDRIVE),
    ("imcp01", AppTag.COMPANY_PORTAL),
    ("mswd2019", AppTag.WORD),
    ("xcel2019", AppTag.EXCEL),
    ("ppt32019", AppTag.POWERPOINT),
    ("onmc2019", AppTag.ONENOTE),
    ("mscp10", AppTag.COPILOT),
    ("wdavconsumer", AppTag.DEFENDER),
    ("wdav00", AppTag.DEFENDER),
    ("wdavshim", AppTag.DEFENDER),
    ("msqa01", AppTag.QUICK_ASSIST),
    ("msrh01", AppTag.REMOTE_HELP),
    ("msfb16", AppTag.SKYPE),
    ("msrd10", AppTag.WINDOWS_APP),
    ("msau04", AppTag.MAU),
)


def classify(identifier: str) -> AppTag:
    """Return the AppTag whose identifier occurs in *identifier* (case-insensitive)."""
    lowered = identifier.lower()
    for substring, tag in APP_IDENTIFIERS:
        if substring in lowered:
            return tag
    return AppTag.OTHER


def classify_record(message: str, source_app: str) -> AppTag:
    """Classify using both the message and the source app token.

    The newline keeps an identifier from being formed across the two values.
    """
    return classify(f"{message}\n{source_app}")


def display_name(identifier: str) -> str:
    """Friendly name for a known identifier, or the identifier itself."""
    tag = classify(identifier)
    return identifier if tag is AppTag.OTHER else tag.value
