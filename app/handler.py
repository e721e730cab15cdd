import sys
from collections.abc import Mapping

from aws_lambda_powertools import Logger, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from dotenv import load_dotenv

from container import build_container
from errors import SyncError
from settings import Settings
from sync import SyncResult


logger = Logger()
tracer = Tracer()


def run_sync(environ: Mapping[str, str] | None = None) -> SyncResult:
    # Validated before the container builds any HTTP client.
    settings = Settings.from_env(environ)
    logger.info(
        "Configuration loaded",
        extra={"provider": settings.provider.value, "policy": settings.selection_policy.value},
    )
    container = build_container(settings)
    return container.roster_sync().run()


@logger.inject_lambda_context
@tracer.capture_lambda_handler
def lambda_handler(event: dict, context: LambdaContext) -> dict:
    """Roster sync handler. Triggered by an EventBridge schedule."""
    logger.info("Starting oncall notifier")

    try:
        result = run_sync()
    except SyncError:
        logger.exception("Roster sync failed")
        raise

    return result.model_dump()


def main() -> int:
    load_dotenv()
    logger.info("Starting oncall notifier")

    try:
        run_sync()
    except SyncError:
        logger.exception("Roster sync failed")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
