"""Audit trail for account, credit and publication events."""

from beanie import Document, PydanticObjectId

from storyforge.models.audit_log import AuditEvent, AuditLog


async def log_event(
    event: AuditEvent,
    user_id: PydanticObjectId | None,
    subject: Document | None = None,
    **metadata,
) -> AuditLog:
    """Record event against the subject document's collection and id."""
    entry = AuditLog(
        event=event,
        user_id=user_id,
        collection=subject.get_collection_name() if subject is not None else None,
        document_id=subject.id if subject is not None else None,
        metadata=metadata,
    )
    await entry.insert()
    return entry


async def recent_events(user_id: PydanticObjectId, limit: int = 20) -> list[AuditLog]:
    return await AuditLog.find(AuditLog.user_id == user_id).sort("-created_at", "-_id").limit(limit).to_list()
