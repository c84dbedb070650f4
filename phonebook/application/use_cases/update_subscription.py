from __future__ import annotations

from phonebook.application.dto.me import MeOutput, UpdateSubscriptionInput
from phonebook.application.ports.user_store_port import UserStorePort
from phonebook.domain.entities.user import SUBSCRIPTIONS
from phonebook.domain.exceptions import InvalidSubscriptionError, UnknownUserError

from .auth_common import utcnow
from .get_me import GetMeUseCase


class UpdateSubscriptionUseCase:
    def __init__(self, *, user_store: UserStorePort):
        self._user_store = user_store

    def execute(self, command: UpdateSubscriptionInput) -> MeOutput:
        if command.subscription not in SUBSCRIPTIONS:
            raise InvalidSubscriptionError(
                f"subscription must be one of: {', '.join(SUBSCRIPTIONS)}."
            )
        user = self._user_store.update_subscription(
            user_id=command.user_id,
            subscription=command.subscription,
            now=utcnow(),
        )
        if user is None:
            raise UnknownUserError("User not found")
        return GetMeUseCase().execute(user=user)
