import random

from aws_lambda_powertools import Logger

from errors import ConfigurationError
from settings import SelectionPolicy


logger = Logger(child=True)


class SupportSelector:
    def __init__(
        self,
        approved: list[str],
        overrides: list[str],
        policy: SelectionPolicy = SelectionPolicy.BATCH,
        rng: random.Random | None = None,
    ):
        self._approved = set(approved)
        self._overrides = list(overrides)
        self._policy = policy
        self._rng = rng or random.Random()

    def select(self, candidates: list[str]) -> list[str]:
        if self._policy is SelectionPolicy.PER_CANDIDATE:
            selected = [c if c in self._approved else self._pick_override() for c in candidates]
        else:
            selected = [c for c in candidates if c in self._approved]
            if not selected:
                selected.append(self._pick_override())

        logger.info(
            "Selected support users",
            extra={"policy": self._policy.value, "candidates": candidates, "selected": selected},
        )
        return selected

    def _pick_override(self) -> str:
        if not self._overrides:
            raise ConfigurationError(["SUPPORT_OVERRIDE_LIST is empty but an override pick is required"])
        return self._rng.choice(self._overrides)
