from __future__ import annotations

import logging

from phonebook.application.dto.me import UpdateAvatarInput, UpdateAvatarOutput
from phonebook.application.ports.avatar_processor_port import AvatarProcessorPort
from phonebook.application.ports.user_store_port import UserStorePort
from phonebook.domain.exceptions import AvatarInputError

from .auth_common import utcnow


logger = logging.getLogger(__name__)


class UpdateAvatarUseCase:
    def __init__(self, *, user_store: UserStorePort, avatar_processor: AvatarProcessorPort):
        self._user_store = user_store
        self._avatar_processor = avatar_processor

    def execute(self, command: UpdateAvatarInput) -> UpdateAvatarOutput:
        if not command.content:
            raise AvatarInputError("Avatar file is required.")

        avatar_url = self._avatar_processor.process(
            content=command.content,
            filename=command.filename,
            user_id=command.user_id,
        )
        self._user_store.update_avatar_url(user_id=command.user_id, avatar_url=avatar_url, now=utcnow())
        logger.info("update_avatar: stored user_id=%s avatar_url=%s", command.user_id, avatar_url)
        return UpdateAvatarOutput(avatar_url=avatar_url)
