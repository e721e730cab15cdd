import math
import os
from collections.abc import Mapping
from enum import Enum

from pydantic import BaseModel, Field

from errors import ConfigurationError


class Provider(str, Enum):
    PAGERDUTY = "pagerduty"
    OPSGENIE = "opsgenie"


class SelectionPolicy(str, Enum):
    BATCH = "batch"
    PER_CANDIDATE = "per_candidate"


REQUIRED_VARIABLES = [
    "MATTERMOST_URL",
    "MATTERMOST_BOT_TOKEN",
    "MATTERMOST_SREONCALL_GROUPID",
    "MATTERMOST_SRESUPPORT_GROUPID",
    "MATTERMOST_SREONCALL_NOTIFICATION_HOOK",
    "MATTERMOST_SRESUPPORT_NOTIFICATION_HOOK",
    "ONCALL_HOUR_SHIFTS",
    "PRIMARY_SCHEDULE_ID",
    "SECONDARY_SCHEDULE_ID",
    "SUPPORT_APPROVED_LIST",
    "SUPPORT_OVERRIDE_LIST",
]

PROVIDER_KEY_VARIABLES = {
    Provider.PAGERDUTY: "PAGERDUTY_APIKEY",
    Provider.OPSGENIE: "OPSGENIE_APIKEY",
}

DEFAULT_SELECTION_POLICY = {
    Provider.PAGERDUTY: SelectionPolicy.BATCH,
    Provider.OPSGENIE: SelectionPolicy.PER_CANDIDATE,
}


def split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseModel):
    provider: Provider = Provider.PAGERDUTY
    provider_api_key: str
    provider_api_url: str
    opsgenie_username_detail: str = "mattermost_username"

    mattermost_url: str
    mattermost_bot_token: str
    oncall_group_id: str
    support_group_id: str
    oncall_webhook_url: str
    support_webhook_url: str
    notification_title_link: str = "https://mattermost.app.opsgenie.com/alert"

    hour_shift: int
    primary_schedule: str
    secondary_schedule: str
    approved_list: list[str] = Field(default_factory=list)
    override_list: list[str] = Field(min_length=1)
    selection_policy: SelectionPolicy = SelectionPolicy.BATCH

    http_timeout: float = 10.0
    run_deadline: float = 120.0

    model_config = {"frozen": True}

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Build settings from environment variables.

        Every missing or malformed variable is collected first, so a single
        ConfigurationError names all of them instead of just the first one.
        """
        env = os.environ if environ is None else environ
        problems: list[str] = []

        def get(name: str, default: str = "") -> str:
            return env.get(name, default).strip()

        provider = Provider.PAGERDUTY
        try:
            provider = Provider(get("ONCALL_PROVIDER", "pagerduty").lower())
        except ValueError:
            problems.append(f"ONCALL_PROVIDER must be one of {[p.value for p in Provider]}")

        key_variable = PROVIDER_KEY_VARIABLES[provider]
        for name in [key_variable, *REQUIRED_VARIABLES]:
            if not get(name):
                problems.append(f"Environment variable {name} was not set")

        hour_shift = 0
        if get("ONCALL_HOUR_SHIFTS"):
            try:
                hour_shift = int(get("ONCALL_HOUR_SHIFTS"))
            except ValueError:
                problems.append("ONCALL_HOUR_SHIFTS must be an integer")

        override_list = split_list(get("SUPPORT_OVERRIDE_LIST"))
        if get("SUPPORT_OVERRIDE_LIST") and not override_list:
            problems.append("SUPPORT_OVERRIDE_LIST must name at least one user")

        policy = DEFAULT_SELECTION_POLICY[provider]
        if get("SUPPORT_SELECTION_POLICY"):
            try:
                policy = SelectionPolicy(get("SUPPORT_SELECTION_POLICY").lower())
            except ValueError:
                problems.append(
                    f"SUPPORT_SELECTION_POLICY must be one of {[p.value for p in SelectionPolicy]}"
                )

        timeouts = {}
        for name, default in (("HTTP_TIMEOUT_SECONDS", "10"), ("RUN_DEADLINE_SECONDS", "120")):
            try:
                timeouts[name] = float(get(name) or default)
                if not math.isfinite(timeouts[name]) or timeouts[name] <= 0:
                    raise ValueError(name)
            except ValueError:
                problems.append(f"{name} must be a positive number")

        if problems:
            raise ConfigurationError(problems)

        if provider is Provider.PAGERDUTY:
            api_url = get("PAGERDUTY_API_URL", "https://api.pagerduty.com")
        else:
            api_url = get("OPSGENIE_API_URL", "https://api.opsgenie.com")

        return cls(
            provider=provider,
            provider_api_key=get(key_variable),
            provider_api_url=api_url.rstrip("/"),
            opsgenie_username_detail=get("OPSGENIE_USERNAME_DETAIL", "mattermost_username"),
            mattermost_url=get("MATTERMOST_URL").rstrip("/"),
            mattermost_bot_token=get("MATTERMOST_BOT_TOKEN"),
            oncall_group_id=get("MATTERMOST_SREONCALL_GROUPID"),
            support_group_id=get("MATTERMOST_SRESUPPORT_GROUPID"),
            oncall_webhook_url=get("MATTERMOST_SREONCALL_NOTIFICATION_HOOK"),
            support_webhook_url=get("MATTERMOST_SRESUPPORT_NOTIFICATION_HOOK"),
            notification_title_link=get(
                "NOTIFICATION_TITLE_LINK", "https://mattermost.app.opsgenie.com/alert"
            ),
            hour_shift=hour_shift,
            primary_schedule=get("PRIMARY_SCHEDULE_ID"),
            secondary_schedule=get("SECONDARY_SCHEDULE_ID"),
            approved_list=split_list(get("SUPPORT_APPROVED_LIST")),
            override_list=override_list,
            selection_policy=policy,
            http_timeout=timeouts["HTTP_TIMEOUT_SECONDS"],
            run_deadline=timeouts["RUN_DEADLINE_SECONDS"],
        )
