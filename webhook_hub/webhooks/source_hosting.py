"""
GitHub Event Handlers

Observational handlers for repository activity. Each extracts the repository
and user identifiers from the payload and records the activity through the
injected ActivityTracker. Missing identifiers raise KeyError/TypeError, which
the dispatcher turns into a handler failure.
"""

import logging
from typing import Any, Mapping

from webhook_hub.webhooks.capabilities import HandlerServices
from webhook_hub.webhooks.events import ActionResult

logger = logging.getLogger(__name__)


def handle_star(event: Mapping[str, Any], services: HandlerServices) -> ActionResult:
    action = event.get("action")
    repo = event["repository"]["full_name"]
    user = event["sender"]["login"]

    logger.info(f"Star {action} on {repo} by {user}")
    services.tracker.track("star", repo, user, event_action=action)

    return ActionResult("star_tracked", {"repo": repo, "user": user, "event_action": action})


def handle_fork(event: Mapping[str, Any], services: HandlerServices) -> ActionResult:
    repo = event["repository"]["full_name"]
    user = event["sender"]["login"]
    fork = event["forkee"]["full_name"]

    logger.info(f"Fork created: {repo} -> {fork} by {user}")
    services.tracker.track("fork", repo, user, fork=fork)

    return ActionResult("fork_tracked", {"repo": repo, "fork": fork, "user": user})


def handle_issues(event: Mapping[str, Any], services: HandlerServices) -> ActionResult:
    action = event.get("action")
    repo = event["repository"]["full_name"]
    issue = event["issue"]["number"]
    user = event["sender"]["login"]

    logger.info(f"Issue {action}: {repo}#{issue} by {user}")
    services.tracker.track("issues", repo, user, issue=issue, event_action=action)

    return ActionResult(
        "issue_triaged",
        {"repo": repo, "issue": issue, "user": user, "event_action": action},
    )
