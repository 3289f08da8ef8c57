from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..data.codec import from_store_timestamp
from ..data.directory import Profile
from ..data.store import eq
from ..domain import AttendeeNotification, AttendeeProfile, NotFound, StoreUnavailable, UserRole
from .context import ServiceContext

logger = logging.getLogger(__name__)

PROFILE_LOOKUP_CAP = 20
PLACEHOLDER_NAME = "Community member"
ANONYMOUS_NAME = "Anonymous"


def _display_name(profile: Profile) -> str:
    stage_name = (profile.get("stage_name") or "").strip()
    if stage_name:
        return stage_name
    full_name = f"{profile.get('first_name') or ''} {profile.get('last_name') or ''}".strip()
    return full_name or ANONYMOUS_NAME


@dataclass(slots=True)
class AttendanceTracker:
    """Membership of users in an event's ``attendees`` set.

    Toggles go through the store's atomic array operations, which also keep
    ``attendee_count`` equal to the set's size.
    """

    context: ServiceContext

    async def toggle_attendance(self, event_id: str, user_id: str) -> bool:
        """Flip ``user_id``'s attendance and return whether they now attend."""

        document = await self.context.events.read(event_id)
        if document is None:
            raise NotFound(event_id)

        store = self.context.events
        if user_id in (document.get("attendees") or []):
            updated = await store.array_remove(event_id, "attendees", user_id, count_field="attendee_count")
        else:
            updated = await store.array_union(event_id, "attendees", user_id, count_field="attendee_count")

        attending = user_id in (updated.get("attendees") or [])
        logger.info("Attendance toggled for event %s, user %s: %s", event_id, user_id, attending)
        return attending

    async def is_user_attending(self, event_id: str, user_id: str) -> bool:
        try:
            document = await self.context.events.read(event_id)
        except StoreUnavailable:
            logger.exception("Error checking attendance for event %s", event_id)
            return False
        if document is None:
            return False
        return user_id in (document.get("attendees") or [])

    async def get_attendee_notifications(self, artist_id: str) -> List[AttendeeNotification]:
        """Attendees of the artist's events, the artist themself excluded."""

        try:
            documents = await self.context.events.query([eq("artist_id", artist_id)], order_by="date")
        except StoreUnavailable:
            logger.exception("Error fetching attendee notifications for %s", artist_id)
            return []

        notifications: list[AttendeeNotification] = []
        for document in documents:
            others = [uid for uid in document.get("attendees") or [] if uid != artist_id]
            if not others:
                continue
            try:
                when = from_store_timestamp(document.get("date"), self.context.tz)
            except ValueError:
                logger.warning("Event %s has an unreadable date %r", document.get("id"), document.get("date"))
                when = None
            notifications.append(
                AttendeeNotification(
                    event_id=str(document["id"]),
                    venue=document.get("venue") or "",
                    city=document.get("city") or "",
                    date=when,
                    attendees=others,
                )
            )
        return notifications

    async def get_attendee_profiles(
        self,
        user_ids: Iterable[str],
        cap: int = PROFILE_LOOKUP_CAP,
    ) -> List[AttendeeProfile]:
        profiles: list[AttendeeProfile] = []
        for uid in list(user_ids)[:cap]:
            profiles.append(await self._resolve_profile(uid))
        return profiles

    async def _resolve_profile(self, uid: str) -> AttendeeProfile:
        directory = self.context.profiles
        try:
            record: Optional[Profile] = await directory.lookup_artist(uid)
            if record is None:
                record = await directory.lookup_programmer(uid)
        except StoreUnavailable:
            logger.warning("Profile lookup failed for %s", uid, exc_info=True)
            record = None

        if record is None:
            return AttendeeProfile(uid=uid, name=PLACEHOLDER_NAME)
        return AttendeeProfile(
            uid=uid,
            name=_display_name(record),
            profile_pic_url=record.get("profile_pic_url") or None,
            role=record.get("role") or UserRole.USER.value,
        )

    # Supporters are a separate set from attendees and carry no counter.

    async def add_supporter(self, event_id: str, supporter_id: str) -> None:
        await self.context.events.array_union(event_id, "supporters", supporter_id)
        logger.info("Supporter %s added to event %s", supporter_id, event_id)

    async def remove_supporter(self, event_id: str, supporter_id: str) -> None:
        await self.context.events.array_remove(event_id, "supporters", supporter_id)
        logger.info("Supporter %s removed from event %s", supporter_id, event_id)
