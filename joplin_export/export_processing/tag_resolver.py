"""
Tag resolution for exported notes.

Every tag candidate is looked up in Joplin first. A missing tag is created,
a unique match is reused and an ambiguous match is skipped, so a note never
gets an arbitrary one of several equally named tags. Tag problems are only
ever warnings: the note exists already and stays exported.
"""
from typing import List, Optional

from ..exceptions import JoplinAPIError
from ..models.mail import MailHeader, TagDefinition
from ..models.note import OutcomeStatus, TagOutcome
from ..models.settings import ExportSettings
from ..utils.logging import get_logger
from .interface import MailHost
from .joplin_client import JoplinClient

logger = get_logger(__name__)


class TagSkipped(Exception):
    """A tag candidate that will not be attached."""


def split_user_tags(tags_setting: str) -> List[str]:
    """User specified tags are stored in a comma separated string."""
    return tags_setting.split(",") if tags_setting else []


class TagResolver:
    """Links the configured and the mail's own tags to a note."""

    def __init__(self, client: JoplinClient, host: MailHost):
        self.client = client
        self.host = host

    async def collect_candidates(
        self, settings: ExportSettings, header: MailHeader
    ) -> List[str]:
        """User tags first, then the labels of the mail's own tags."""
        candidates = split_user_tags(settings.note_tags)

        if settings.note_tags_from_email and header.tags:
            tag_mapping = {
                definition.key: definition.tag
                for definition in map(self._definition, await self.host.list_tags())
            }
            for tag_key in header.tags:
                label = tag_mapping.get(tag_key)
                if label is None:
                    logger.warning(
                        "Unknown mail tag key",
                        extra={"data": {"mail_id": header.id, "tag_key": tag_key}}
                    )
                    continue
                candidates.append(label)

        return candidates

    async def resolve_all(self, note_id: str, candidates: List[str]) -> List[TagOutcome]:
        outcomes = []
        for candidate in candidates:
            outcomes.append(await self.resolve(note_id, candidate))
        return outcomes

    async def resolve(self, note_id: str, candidate: str) -> TagOutcome:
        """
        Find or create one tag and attach it to the note.

        Args:
            note_id: Id of the exported note
            candidate: Raw tag text

        Returns:
            Whether the tag got attached, with the reason if it was skipped
        """
        # Joplin strips whitespace from tag titles anyway. Searching for the
        # stripped title keeps lookup and creation consistent.
        tag = candidate.strip()
        if not tag:
            return self._skip(tag, "Empty tag", warn=False)

        try:
            matching_tags = await self.client.search_tags(tag)
        except JoplinAPIError as e:
            return self._skip(tag, f"Search for tag failed: {e}")

        try:
            tag_id = await self._pick_tag_id(tag, matching_tags)
        except TagSkipped as e:
            return self._skip(tag, str(e))

        try:
            await self.client.attach_tag(tag_id, note_id)
        except JoplinAPIError as e:
            return self._skip(tag, f"Failed to attach tag to note: {e}", tag_id=tag_id)

        return TagOutcome(tag=tag, status=OutcomeStatus.ATTACHED, tag_id=tag_id)

    async def _pick_tag_id(self, tag: str, matching_tags: List[dict]) -> str:
        """
        Return the id of the tag to attach.

        Raises:
            TagSkipped: if the tag could not be created or is ambiguous
        """
        if len(matching_tags) == 0:
            try:
                tag_info = await self.client.create_tag(tag)
            except JoplinAPIError as e:
                raise TagSkipped(f"Failed to create tag: {e}") from e
            if not isinstance(tag_info, dict) or not tag_info.get("id"):
                raise TagSkipped(f"Failed to create tag: unexpected response {tag_info!r}")
            logger.debug("Created tag", extra={"data": {"tag": tag, "tag_id": tag_info["id"]}})
            return tag_info["id"]

        if len(matching_tags) == 1:
            tag_id = matching_tags[0].get("id") if isinstance(matching_tags[0], dict) else None
            if not tag_id:
                raise TagSkipped(
                    f"Search for tag failed: unexpected response {matching_tags[0]!r}"
                )
            return tag_id

        matching_titles = ", ".join(item.get("title", "") for item in matching_tags)
        raise TagSkipped(f'Too many matching tags for "{tag}": {matching_titles}')

    @staticmethod
    def _definition(raw) -> TagDefinition:
        if isinstance(raw, TagDefinition):
            return raw
        return TagDefinition.model_validate(raw)

    @staticmethod
    def _skip(
        tag: str, reason: str, tag_id: Optional[str] = None, warn: bool = True
    ) -> TagOutcome:
        if warn:
            logger.warning(reason)
        return TagOutcome(tag=tag, status=OutcomeStatus.SKIPPED, tag_id=tag_id, reason=reason)
