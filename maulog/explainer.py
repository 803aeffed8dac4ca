"""Explanation engine: turns raw MAU messages into plain-English sentences.

Rules are tried in order against the lower-cased message. The first rule
whose trigger matches and whose renderer produces text wins. A renderer may
return None to let later rules have a go (the download rule does this when
the message names no outcome).
"""

import re
from dataclasses import dataclass
from typing import Callable

from maulog.classifier import display_name

SHORT_MESSAGE_LIMIT = 100

FALLBACK_EXPLANATION = (
    "MAU performed a system operation. This is normal background activity "
    "to keep your applications updated and secure."
)

# ---------------------------------------------------------------------------
# Compiled regex patterns
# ---------------------------------------------------------------------------

_BASE_VERSION_RE = re.compile(r'AppId:\s*(\w+)\s*=\s*\{\s*\(\(\s*"([^"]+)', re.IGNORECASE)
_SCHEDULE_APP_RE = re.compile(r"\{\s*(\w+)\s*=", re.IGNORECASE)
_APP_STATES_RE = re.compile(r"(\w+)\s*=\s*\{", re.IGNORECASE)
_STATE_CHANGE_RE = re.compile(r"App:\s*(\w+)\s*to:\s*(\d+)", re.IGNORECASE)


@dataclass(frozen=True)
class ExplanationRule:
    name: str
    trigger: Callable[[str], bool]                  # lower-cased message → matched?
    render: Callable[[str, str], str | None]        # (message, lowered) → text


def extract_value(message: str, key: str) -> str | None:
    """Pull a quoted value for *key* out of ``key = "value"`` / ``"key": "value"`` text."""
    pattern = re.compile(r'"?' + re.escape(key) + r'"?\s*[:=]\s*"([^",}]+)"', re.IGNORECASE)
    m = pattern.search(message)
    if not m:
        return None
    return m.group(1).strip()


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------


def _render_base_version(message: str, lowered: str) -> str:
    m = _BASE_VERSION_RE.search(message)
    if m:
        app_id, version = m.groups()
        return (
            f"MAU has identified that {display_name(app_id)} (version {version}) "
            "is installed. This is a step in checking for updates."
        )
    return "MAU is checking the version of an installed application to see if an update is available."


def _render_forced_update(message: str, lowered: str) -> str:
    m = _SCHEDULE_APP_RE.search(message)
    if m:
        name = display_name(m.group(1))
        date = extract_value(message, "ForcedUpdateDate")
        if date:
            return f"A mandatory update for {name} has been scheduled by MAU for {date}."
        return f"A mandatory update for {name} has been scheduled by MAU."
    return (
        "MAU is planning to force updates for an Office application to ensure all "
        "users have the latest security patches and features."
    )


def _render_cloning(message: str, lowered: str) -> str:
    app_id = extract_value(message, "AppID")
    if app_id:
        name = display_name(app_id)
        if "begin" in lowered:
            return f"Starting to prepare update files for {name}."
        if "appnamechanged" in lowered:
            if "Success: YES" in message:
                return f"Successfully prepared update files for {name}."
            return f"Failed to prepare update files for {name}."
    return "MAU is preparing update files for an application."


def _render_app_states(message: str, lowered: str) -> str:
    app_ids = _APP_STATES_RE.findall(message)
    if app_ids:
        names = ", ".join(display_name(a) for a in app_ids)
        return f"MAU is checking the current status of installed applications, including: {names}."
    return "MAU is checking the status of currently installed applications."


def _render_state_change(message: str, lowered: str) -> str:
    m = _STATE_CHANGE_RE.search(message)
    if m:
        app_id, state = m.groups()
        return f"The update process for {display_name(app_id)} has moved to a new state (State: {state})."
    return "The update process for an application has moved to a new state."


def _render_download(message: str, lowered: str) -> str | None:
    if "attempt" in lowered:
        return "MAU is attempting to download a file from Microsoft's servers as part of the update process."
    if "success" in lowered:
        return "MAU successfully downloaded an update file. The process is progressing normally."
    if "failed" in lowered:
        return (
            "MAU failed to download a required file. This could be due to network "
            "issues or server problems."
        )
    if "progress" in lowered:
        return "MAU is currently downloading an update."
    return None


def _render_install(message: str, lowered: str) -> str | None:
    if "success" in lowered or "completed" in lowered:
        return "MAU successfully installed an update. The application is now up to date."
    if "failed" in lowered:
        return (
            "MAU failed to install an update. This could be due to permission "
            "issues or file conflicts."
        )
    if "progress" in lowered:
        return "MAU is currently installing an update. Please do not close the application."
    return None


def _contains(*needles: str) -> Callable[[str], bool]:
    return lambda lowered: any(n in lowered for n in needles)


RULES: tuple[ExplanationRule, ...] = (
    ExplanationRule("version-detection", _contains("update baseversions found"), _render_base_version),
    ExplanationRule("forced-update", _contains("application forced update schedule"), _render_forced_update),
    ExplanationRule("file-preparation", _contains("cloningtask"), _render_cloning),
    ExplanationRule(
        "status-check",
        _contains("calling remoteobjectproxy with current app states"),
        _render_app_states,
    ),
    ExplanationRule("state-transition", _contains("updating application state for app"), _render_state_change),
    ExplanationRule("download", _contains("fetching file", "download"), _render_download),
    ExplanationRule("install", _contains("install"), _render_install),
)


def explain(message: str, source_app: str = "", severity: str = "") -> str:
    """Return a human-readable explanation of *message*. Never raises.

    *source_app* and *severity* are accepted so rules may use them; the
    current rule set only looks at the message.
    """
    lowered = message.lower()
    for rule in RULES:
        if not rule.trigger(lowered):
            continue
        text = rule.render(message, lowered)
        if text is not None:
            return text

    if len(message) < SHORT_MESSAGE_LIMIT:
        return message
    return FALLBACK_EXPLANATION
