"""Journal management flow: list, create, edit and delete entries.

The flow keeps the in-memory view the user works with (the fetched entries,
the category filter and the entry form) and drives the JournalRepository.
Every mutation is followed by a full re-fetch, so the view always mirrors
storage. Operations return an Alert for the shell to show; storage and image
source failures are logged here and never propagate.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

from food_journal.config.models import ImageSettings, JournalSettings
from food_journal.domain.alerts import ERROR_TITLE, VALIDATION_TITLE, Alert
from food_journal.domain.exceptions import ImagePermissionError, ImageSourceError
from food_journal.domain.models import ALL_CATEGORIES, Category, JournalEntry, filter_choices
from food_journal.logging import get_logger
from food_journal.logging.context import log_context
from food_journal.persistence.exceptions import PersistenceError, RecordNotFoundError
from food_journal.persistence.repositories import JournalRepository

from .images import ImageOrigin, ImageRequest, ImageSource

logger = get_logger(__name__, component="journal")

ConfirmFn = Callable[[str, str], bool]

NOT_AUTHENTICATED = Alert(title=ERROR_TITLE, message="User not authenticated")
ENTRY_NOT_FOUND = Alert(title=ERROR_TITLE, message="Journal entry not found")
MISSING_FIELDS = Alert(title=VALIDATION_TITLE, message="Please add both an image and description")

_IMAGE_FAILURE_MESSAGES = {
    ImageOrigin.CAMERA: "Failed to open camera",
    ImageOrigin.GALLERY: "Failed to select image",
}


@dataclass
class JournalForm:
    """The entry being composed or edited.

    ``editing_id`` is None while composing a new entry and holds the target
    entry's id while editing.
    """

    category: Category
    image: Optional[str] = None
    description: str = ""
    editing_id: Optional[int] = None

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None


class JournalFlow:
    """In-memory journal view for one authenticated user.

    Args:
        repository: Storage for journal entries
        user_id: Identifier handed over by the authentication flow
        image_source: Camera / gallery collaborator
        confirm: Callback asking a yes/no question, returns True for yes
        settings: Journal defaults (default category)
        image_settings: Options sent with every image request
    """

    def __init__(
        self,
        repository: JournalRepository,
        user_id: Optional[int],
        image_source: ImageSource,
        confirm: ConfirmFn,
        settings: Optional[JournalSettings] = None,
        image_settings: Optional[ImageSettings] = None,
    ):
        self.repository = repository
        self.user_id = user_id
        self.image_source = image_source
        self.confirm = confirm
        self.settings = settings or JournalSettings()
        self.image_settings = image_settings or ImageSettings()

        self.entries: List[JournalEntry] = []
        self.filter_category: str = ALL_CATEGORIES
        self.form = JournalForm(category=self.settings.default_category)

    # ---- List ----

    def refresh(self) -> Optional[Alert]:
        """Re-fetch all of the user's entries, most recent first.

        On failure the previously fetched entries are kept.

        Returns:
            None on success, an error Alert otherwise
        """
        if not self.user_id:
            return NOT_AUTHENTICATED

        with log_context(user_id=self.user_id):
            try:
                self.entries = self.repository.list_for_user(self.user_id)
            except PersistenceError as e:
                logger.error(
                    f"Error loading journals: {e}",
                    extra={"event": "journal.list.failed", "error_type": type(e).__name__},
                )
                return Alert(title=ERROR_TITLE, message="Failed to load journals")

            logger.debug(
                "Journal entries loaded",
                extra={"event": "journal.list.loaded", "entry_count": len(self.entries)},
            )
        return None

    def visible_entries(self) -> List[JournalEntry]:
        """Entries passing the current category filter, in fetched order."""
        if self.filter_category == ALL_CATEGORIES:
            return list(self.entries)
        return [entry for entry in self.entries if entry.category.value == self.filter_category]

    def set_filter(self, category: str) -> Optional[Alert]:
        """Set the list filter to 'All' or one of the categories."""
        matched = _match_choice(category, filter_choices())
        if matched is None:
            return Alert(
                title=VALIDATION_TITLE,
                message=f"Unknown category '{category}'. Choose one of: {', '.join(filter_choices())}",
            )
        self.filter_category = matched
        return None

    # ---- Form ----

    def set_description(self, description: str) -> None:
        self.form.description = description or ""

    def set_category(self, category: str) -> Optional[Alert]:
        """Set the form's category; 'All' is not a valid entry category."""
        matched = _match_choice(category, Category.values())
        if matched is None:
            return Alert(
                title=VALIDATION_TITLE,
                message=f"Unknown category '{category}'. Choose one of: {', '.join(Category.values())}",
            )
        self.form.category = Category(matched)
        return None

    def take_photo(self) -> Optional[Alert]:
        return self._acquire_image(ImageOrigin.CAMERA)

    def pick_image(self) -> Optional[Alert]:
        return self._acquire_image(ImageOrigin.GALLERY)

    def begin_edit(self, entry_id: int) -> Optional[Alert]:
        """Pre-fill the form from a listed entry and target it for update."""
        entry = next((e for e in self.entries if e.id == entry_id), None)
        if entry is None:
            return ENTRY_NOT_FOUND

        self.form = JournalForm(
            category=entry.category,
            image=entry.image,
            description=entry.description,
            editing_id=entry.id,
        )
        return None

    def reset_form(self) -> None:
        """Clear image, description, category and edit target."""
        self.form = JournalForm(category=self.settings.default_category)

    # ---- Create / Update ----

    def save(self) -> Alert:
        """Create a new entry, or update the entry being edited.

        Requires an image and a description that is non-empty after
        trimming; otherwise nothing is sent to storage. On success the list
        is re-fetched and the form cleared. On a storage failure the form and
        list are left as they were.

        Returns:
            Alert describing the outcome
        """
        image = (self.form.image or "").strip()
        description = self.form.description.strip()
        if not image or not description:
            return MISSING_FIELDS

        if not self.user_id:
            return NOT_AUTHENTICATED

        with log_context(user_id=self.user_id):
            try:
                if self.form.is_editing:
                    self.repository.update(
                        self.form.editing_id,
                        self.user_id,
                        image,
                        description,
                        self.form.category,
                    )
                    logger.info(
                        "Journal entry updated",
                        extra={"event": "journal.entry.updated", "entry_id": self.form.editing_id},
                    )
                    outcome = Alert.success("Journal updated successfully")
                else:
                    entry = self.repository.create(
                        self.user_id,
                        image,
                        description,
                        self.form.category,
                    )
                    logger.info(
                        "Journal entry created",
                        extra={"event": "journal.entry.created", "entry_id": entry.id},
                    )
                    outcome = Alert.success("Journal saved successfully")
            except RecordNotFoundError:
                logger.warning(
                    "Journal entry to update no longer exists",
                    extra={"event": "journal.entry.missing", "entry_id": self.form.editing_id},
                )
                return ENTRY_NOT_FOUND
            except PersistenceError as e:
                logger.error(
                    f"Save error: {e}",
                    extra={"event": "journal.entry.save_failed", "error_type": type(e).__name__},
                )
                return Alert.unexpected()

        refresh_alert = self.refresh()
        self.reset_form()
        return refresh_alert or outcome

    # ---- Delete ----

    def delete(self, entry_id: int) -> Optional[Alert]:
        """Delete an entry after the user confirms.

        Returns:
            None if the user declined, otherwise an Alert with the outcome
        """
        if not self.user_id:
            return NOT_AUTHENTICATED

        if not self.confirm("Confirm Delete", "Are you sure?"):
            return None

        with log_context(user_id=self.user_id):
            try:
                self.repository.delete(entry_id, self.user_id)
            except RecordNotFoundError:
                return ENTRY_NOT_FOUND
            except PersistenceError as e:
                logger.error(
                    f"Delete error: {e}",
                    extra={
                        "event": "journal.entry.delete_failed",
                        "entry_id": entry_id,
                        "error_type": type(e).__name__,
                    },
                )
                return Alert(title=ERROR_TITLE, message="Could not delete journal")

            logger.info(
                "Journal entry deleted",
                extra={"event": "journal.entry.deleted", "entry_id": entry_id},
            )

        if self.form.editing_id == entry_id:
            self.reset_form()
        return self.refresh() or Alert.success("", title="Deleted")

    # ---- Helpers ----

    def _acquire_image(self, origin: ImageOrigin) -> Optional[Alert]:
        request = ImageRequest(
            origin=origin,
            allows_editing=self.image_settings.allows_editing,
            aspect=tuple(self.image_settings.aspect),
            quality=self.image_settings.quality,
        )
        try:
            selection = self.image_source.request_image(request)
        except ImagePermissionError as e:
            logger.warning(
                f"Image source permission denied: {e}",
                extra={"event": "journal.image.permission_denied", "origin": origin.value},
            )
            return Alert(title=ERROR_TITLE, message=_IMAGE_FAILURE_MESSAGES[origin])
        except ImageSourceError as e:
            logger.error(
                f"Image source error: {e}",
                extra={"event": "journal.image.failed", "origin": origin.value},
            )
            return Alert(title=ERROR_TITLE, message=_IMAGE_FAILURE_MESSAGES[origin])

        if selection is not None:
            self.form.image = selection.uri
        return None


def _match_choice(value: str, choices: List[str]) -> Optional[str]:
    """Case-insensitive lookup of value among choices."""
    wanted = (value or "").strip().lower()
    for choice in choices:
        if choice.lower() == wanted:
            return choice
    return None
