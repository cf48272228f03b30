"""Interactive console shell: routes between the auth and journal screens.

The shell is the only place that talks to the terminal. Flows return alerts
and the shell prints them; the only state that crosses from the auth screen
to the journal screen is the user id.
"""

import getpass
import shlex
from enum import Enum
from typing import Callable, List, Optional

from food_journal.auth.service import AuthFlow, AuthMode
from food_journal.config.models import AppConfig
from food_journal.domain.alerts import Alert
from food_journal.domain.models import Category, JournalEntry
from food_journal.journal.images import FileImageSource, ImageSource
from food_journal.journal.service import JournalFlow
from food_journal.logging import get_logger
from food_journal.logging.context import log_context
from food_journal.persistence.database import PersistenceGateway
from food_journal.persistence.repositories import JournalRepository, UserRepository
from food_journal.utils.timestamps import format_display_date

logger = get_logger(__name__, component="shell")

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]

AUTH_HELP = """Commands:
  login      Log in with email and password
  register   Create an account
  switch     Toggle between login and registration
  quit       Exit"""

JOURNAL_HELP = """Commands:
  list                 Show your food journals
  filter <category>    Filter the list (All, {categories})
  photo                Take a photo for the entry
  gallery              Choose an image from the gallery
  describe <text>      Set what you ate
  category <name>      Set the entry category
  save                 Save the entry (or the edit in progress)
  edit <id>            Edit a listed entry
  cancel               Discard the entry being edited
  delete <id>          Delete a listed entry
  logout               Return to the login screen
  quit                 Exit""".format(categories=", ".join(Category.values()))


class ScreenExit(str, Enum):
    """Why a screen loop ended."""

    LOGOUT = "logout"
    QUIT = "quit"


class ConsoleShell:
    """Console rendition of the app's two screens.

    Args:
        gateway: Initialized persistence gateway shared by every repository
        app_config: Validated application configuration
        input_fn: Reads one line of user input
        output_fn: Writes one line of output
        password_fn: Reads a password without echo
        image_source: Image collaborator (defaults to a file-path prompt)
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        app_config: Optional[AppConfig] = None,
        input_fn: InputFn = input,
        output_fn: OutputFn = print,
        password_fn: Optional[InputFn] = None,
        image_source: Optional[ImageSource] = None,
    ):
        self.gateway = gateway
        self.app_config = app_config or AppConfig()
        self.input_fn = input_fn
        self.output_fn = output_fn
        self.password_fn = password_fn or getpass.getpass
        self.image_source = image_source or FileImageSource(prompt_fn=input_fn)

        self.users = UserRepository(gateway)
        self.journals = JournalRepository(gateway)

    def run(self) -> int:
        """Alternate between the auth and journal screens until the user quits.

        Returns:
            Process exit code (always 0; failures are shown as alerts)
        """
        while True:
            user_id = self._auth_screen()
            if user_id is None:
                return 0

            with log_context(user_id=user_id):
                logger.info("Journal screen opened", extra={"event": "shell.journal.opened"})
                if self._journal_screen(user_id) is ScreenExit.QUIT:
                    return 0
                logger.info("User logged out", extra={"event": "shell.logout"})

    # ---- Auth screen ----

    def _auth_screen(self) -> Optional[int]:
        """Loop until a user is identified (returns its id) or quits (None)."""
        flow = AuthFlow(
            self.users,
            min_password_length=self.app_config.auth.min_password_length,
            hash_iterations=self.app_config.auth.hash_iterations,
        )

        while True:
            title = "Login" if flow.mode is AuthMode.LOGIN else "Create Account"
            self.output_fn(f"\n== {title} ==")
            command = self._read(f"{flow.mode.value}> ")
            if command is None or command in ("quit", "exit"):
                return None

            if command in ("help", "?"):
                self.output_fn(AUTH_HELP)
            elif command == "switch":
                flow.toggle_mode()
            elif command in ("login", "register"):
                wanted = AuthMode(command)
                if flow.mode is not wanted:
                    flow.toggle_mode()

                email = self._read("Email: ", lower=False)
                if email is None:
                    return None
                try:
                    password = self.password_fn("Password: ")
                except EOFError:
                    return None

                result = flow.submit(email, password)
                if result.success:
                    self.output_fn(f"Welcome! Signed in as {email.strip()}")
                    return result.user_id
                self._show(result.alert)
            elif command:
                self.output_fn(f"Unknown command '{command}'. Type 'help' for options.")

    # ---- Journal screen ----

    def _journal_screen(self, user_id: int) -> ScreenExit:
        flow = JournalFlow(
            self.journals,
            user_id,
            image_source=self.image_source,
            confirm=self._confirm,
            settings=self.app_config.journal,
            image_settings=self.app_config.images,
        )

        self._show(flow.refresh())
        self._render_entries(flow)

        while True:
            self._render_form(flow)
            line = self._read("journal> ", lower=False)
            if line is None:
                return ScreenExit.QUIT

            try:
                parts = shlex.split(line)
            except ValueError:
                parts = line.split()
            if not parts:
                continue
            command, args = parts[0].lower(), parts[1:]

            if command in ("quit", "exit"):
                return ScreenExit.QUIT
            if command == "logout":
                return ScreenExit.LOGOUT

            if command in ("help", "?"):
                self.output_fn(JOURNAL_HELP)
            elif command == "list":
                self._show(flow.refresh())
                self._render_entries(flow)
            elif command == "filter":
                self._show(flow.set_filter(" ".join(args) or "All"))
                self._render_entries(flow)
            elif command == "photo":
                self._show(flow.take_photo())
            elif command == "gallery":
                self._show(flow.pick_image())
            elif command == "describe":
                flow.set_description(self._raw_remainder(line))
            elif command == "category":
                self._show(flow.set_category(" ".join(args)))
            elif command == "save":
                self._show(flow.save())
                self._render_entries(flow)
            elif command == "cancel":
                flow.reset_form()
            elif command in ("edit", "delete"):
                entry_id = self._parse_id(args)
                if entry_id is None:
                    self.output_fn(f"Usage: {command} <id>")
                    continue
                if command == "edit":
                    self._show(flow.begin_edit(entry_id))
                else:
                    self._show(flow.delete(entry_id))
                    self._render_entries(flow)
            else:
                self.output_fn(f"Unknown command '{command}'. Type 'help' for options.")

    def _render_entries(self, flow: JournalFlow) -> None:
        entries: List[JournalEntry] = flow.visible_entries()
        self.output_fn(f"\n== Your Food Journals (filter: {flow.filter_category}) ==")
        if not entries:
            self.output_fn("  No journal entries yet.")
            return
        for entry in entries:
            self.output_fn(
                f"  #{entry.id}  {format_display_date(entry.date)}  "
                f"{entry.category.value:<9}  {entry.description}"
            )
            self.output_fn(f"        {entry.image}")

    def _render_form(self, flow: JournalFlow) -> None:
        form = flow.form
        heading = "Edit Journal Entry" if form.is_editing else "Add New Journal Entry"
        self.output_fn(
            f"\n-- {heading}: image={form.image or 'No image selected'} | "
            f"category={form.category.value} | description={form.description or '-'}"
        )

    # ---- IO helpers ----

    def _read(self, prompt: str, lower: bool = True) -> Optional[str]:
        """Read one line; None on end of input."""
        try:
            value = self.input_fn(prompt)
        except EOFError:
            return None
        value = value.strip()
        return value.lower() if lower else value

    def _confirm(self, title: str, message: str) -> bool:
        answer = self._read(f"{title}: {message} [y/N] ")
        return answer in ("y", "yes")

    def _show(self, alert: Optional[Alert]) -> None:
        if alert is not None:
            self.output_fn(str(alert))

    @staticmethod
    def _raw_remainder(line: str) -> str:
        """Text after the command word, as typed; one pair of enclosing quotes is dropped."""
        pieces = line.strip().split(None, 1)
        rest = pieces[1] if len(pieces) == 2 else ""
        if len(rest) >= 2 and rest[0] == rest[-1] and rest[0] in "\"'":
            return rest[1:-1]
        return rest

    @staticmethod
    def _parse_id(args: List[str]) -> Optional[int]:
        if len(args) != 1:
            return None
        try:
            return int(args[0].lstrip("#"))
        except ValueError:
            return None
