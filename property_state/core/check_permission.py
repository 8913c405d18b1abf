import uuid

from fastapi import HTTPException


class CheckOwnership:
    """Gate mutations on the record's owning account.

    A missing record is reported as not found before ownership is looked at,
    so callers get 404 for unknown ids and 403 only for records that exist.
    """

    async def check_owner(
        self,
        owner_id: uuid.UUID | None,
        user_id: uuid.UUID,
        resource: str = "Post",
        action: str = "modify",
    ) -> None:
        if owner_id is None:
            raise HTTPException(status_code=404, detail=f"{resource} not found")
        if owner_id != user_id:
            raise HTTPException(
                status_code=403,
                detail=f"Not authorized to {action} this {resource.lower()}",
            )

    async def check_participant(self, chat, user_id: uuid.UUID) -> None:
        if chat is None:
            raise HTTPException(status_code=404, detail="Chat not found")
        if not chat.has_participant(user_id):
            raise HTTPException(
                status_code=403, detail="Not authorized to access this chat"
            )
