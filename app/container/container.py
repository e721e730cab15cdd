import random

from dependency_injector import containers, providers

from channels import MattermostWebhookChannel
from mattermost import MattermostClient
from oncall import OpsgenieProvider, PagerDutyProvider, Role, Rotation
from reconciler import GroupReconciler
from settings import SelectionPolicy, Settings
from support import SupportSelector
from sync import RosterSync


class Container(containers.DeclarativeContainer):
    config = providers.Configuration()

    oncall_provider = providers.Selector(
        config.provider,
        pagerduty=providers.Singleton(
            PagerDutyProvider,
            api_key=config.provider_api_key,
            api_url=config.provider_api_url,
            timeout=config.http_timeout,
        ),
        opsgenie=providers.Singleton(
            OpsgenieProvider,
            api_key=config.provider_api_key,
            username_detail=config.opsgenie_username_detail,
            api_url=config.provider_api_url,
            timeout=config.http_timeout,
        ),
    )

    mattermost_client = providers.Singleton(
        MattermostClient,
        base_url=config.mattermost_url,
        bot_token=config.mattermost_bot_token,
        timeout=config.http_timeout,
    )

    reconciler = providers.Singleton(GroupReconciler, client=mattermost_client)

    selector = providers.Singleton(
        SupportSelector,
        approved=config.approved_list,
        overrides=config.override_list,
        policy=config.selection_policy.as_(SelectionPolicy),
        rng=providers.Factory(random.Random),
    )

    oncall_channel = providers.Singleton(
        MattermostWebhookChannel,
        webhook_url=config.oncall_webhook_url,
        title_link=config.notification_title_link,
        timeout=config.http_timeout,
    )

    support_channel = providers.Singleton(
        MattermostWebhookChannel,
        webhook_url=config.support_webhook_url,
        title_link=config.notification_title_link,
        timeout=config.http_timeout,
    )

    roster_sync = providers.Factory(
        RosterSync,
        provider=oncall_provider,
        selector=selector,
        reconciler=reconciler,
        oncall_channel=oncall_channel,
        support_channel=support_channel,
        primary=providers.Factory(Rotation, identifier=config.primary_schedule, role=Role.PRIMARY),
        secondary=providers.Factory(Rotation, identifier=config.secondary_schedule, role=Role.SECONDARY),
        oncall_group_id=config.oncall_group_id,
        support_group_id=config.support_group_id,
        hour_shift=config.hour_shift,
        run_deadline=config.run_deadline,
    )


def build_container(settings: Settings) -> Container:
    container = Container()
    container.config.from_dict(settings.model_dump(mode="json"))
    return container
