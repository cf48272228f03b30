"""Test doubles for the journal flow's collaborators.

StubImageSource stands in for the camera / gallery, RecordingConfirm for the
yes/no prompt. make_gateway() and register_user() build a ready database.
"""

from typing import List, Optional, Tuple

from food_journal.journal.images import ImageRequest, ImageSelection, ImageSource
from food_journal.persistence import PersistenceGateway, UserRepository
from food_journal.utils.hashing import hash_password

# Low iteration count keeps tests fast; production uses the configured value.
TEST_HASH_ITERATIONS = 1_000


class StubImageSource(ImageSource):
    """Image source answering every request with a scripted outcome.

    Args:
        uri: URI to return; None simulates a cancelled picker
        error: Exception to raise instead of returning
    """

    def __init__(self, uri: Optional[str] = "img://1", error: Optional[Exception] = None):
        self.uri = uri
        self.error = error
        self.requests: List[ImageRequest] = []

    def request_image(self, request: ImageRequest) -> Optional[ImageSelection]:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.uri is None:
            return None
        return ImageSelection(uri=self.uri, request=request)


class RecordingConfirm:
    """Confirm callback that records prompts and returns a fixed answer."""

    def __init__(self, answer: bool = True):
        self.answer = answer
        self.prompts: List[Tuple[str, str]] = []

    def __call__(self, title: str, message: str) -> bool:
        self.prompts.append((title, message))
        return self.answer


def make_gateway(database_url: str = "sqlite:///:memory:") -> PersistenceGateway:
    """Create and initialize a gateway (in-memory by default)."""
    gateway = PersistenceGateway(database_url)
    gateway.initialize()
    return gateway


def register_user(gateway: PersistenceGateway, email: str = "a@b.com", password: str = "secret1") -> int:
    """Insert a user directly through the repository and return its id."""
    user = UserRepository(gateway).create(
        email, hash_password(password, iterations=TEST_HASH_ITERATIONS)
    )
    assert user is not None
    return user.id
