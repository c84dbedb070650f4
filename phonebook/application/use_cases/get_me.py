from __future__ import annotations

from phonebook.application.dto.me import MeOutput
from phonebook.domain.entities.user import User


class GetMeUseCase:
    def execute(self, *, user: User) -> MeOutput:
        return MeOutput(
            user_id=user.id,
            name=user.name,
            email=user.email,
            subscription=user.subscription,
            avatar_url=user.avatar_url,
            email_verified=user.email_verified,
        )
