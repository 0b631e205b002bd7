import logging
from collections.abc import Callable
from datetime import date, datetime, timezone
from pathlib import Path

from playwright.sync_api import Locator, Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from nbsnapshot.core.config import Settings, get_settings
from nbsnapshot.core.enums import WorkflowState
from nbsnapshot.core.errors import LoginFailedError, SnapshotTimeoutError
from nbsnapshot.core.logging import get_logger
from nbsnapshot.services.credentials import Credentials

SIGNATURE_PREFIX = "Data Committee Snapshot"
ROW_SELECTOR_TEMPLATE = 'table > tbody > tr:has-text("{signature}")'

EXISTING_SNAPSHOT_TIMEOUT_MS = 5000
CREATION_CONFIRM_TIMEOUT_MS = 10000
POLL_INTERVAL_MS = 10000
READY_TIMEOUT_MS = 10 * 60 * 1000


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def snapshot_signature(today: date | None = None) -> str:
    day = today or today_utc()
    return f"{SIGNATURE_PREFIX} {day.isoformat()}"


class SnapshotWorkflow:
    """Drives one admin console session from login to a saved snapshot file.

    The page is owned by this instance for its whole lifetime. Each step moves
    ``state`` forward exactly once; only ``wait_until_ready`` loops.
    """

    def __init__(
        self,
        page: Page,
        *,
        credentials: Credentials,
        console_url: str,
        output_dir: Path,
        settings: Settings | None = None,
        logger: logging.Logger | None = None,
        clock: Callable[[], date] = today_utc,
    ):
        self.page = page
        self.credentials = credentials
        self.console_url = console_url
        self.output_dir = Path(output_dir)
        self.settings = settings or get_settings()
        self.logger = logger or get_logger(f"{self.settings.app_name}.workflow")
        self.clock = clock

        self.state = WorkflowState.UNAUTHENTICATED
        self.transitions: list[WorkflowState] = [self.state]
        self.signature: str | None = None

    def _transition(self, state: WorkflowState, message: str) -> None:
        self.state = state
        self.transitions.append(state)
        self.logger.info(message, extra={"extra": {"state": state.value}})

    def _snapshot_row(self) -> Locator:
        return self.page.locator(ROW_SELECTOR_TEMPLATE.format(signature=self.signature)).first

    def login(self) -> None:
        page = self.page
        self.logger.info(f"Navigating to {self.console_url}")
        page.goto(self.console_url)

        email = page.get_by_label("Email")
        email.click()
        email.fill(self.credentials.username)
        email.press("Tab")
        page.get_by_label("Password", exact=True).fill(self.credentials.password.get_secret_value())
        self.logger.info("Logging in.")
        page.get_by_role("button", name="Continue", exact=True).click()

        if self.credentials.otp:
            self.logger.info("Sending OTP code.")
            page.get_by_role("button", name="Google Authenticator or similar").click()
            page.get_by_label("one-time code").fill(self.credentials.otp)
            page.get_by_role("button", name="Continue", exact=True).click()

        try:
            page.get_by_role("link", name="Settings").wait_for(
                state="visible", timeout=self.settings.login_check_timeout_ms
            )
        except PlaywrightTimeoutError as exc:
            raise LoginFailedError(
                f"Login failed: 'Settings' link not visible after {self.settings.login_check_timeout_ms} ms"
            ) from exc

        self._transition(WorkflowState.AUTHENTICATED, "Logged in, navigating to database snapshot page.")

    def open_snapshot_listing(self) -> None:
        self.page.get_by_role("link", name="Settings").click()
        self.page.get_by_role("link", name="Database").click()
        self._transition(WorkflowState.SNAPSHOT_LOCATING, "Database snapshot page opened.")

    def locate_or_create_snapshot(self) -> None:
        if self.signature is None:
            self.signature = snapshot_signature(self.clock())

        row = self._snapshot_row()
        try:
            row.wait_for(state="visible", timeout=EXISTING_SNAPSHOT_TIMEOUT_MS)
            self.logger.info(f'Snapshot "{self.signature}" found.')
        except PlaywrightTimeoutError:
            self.logger.info(f'Expected snapshot "{self.signature}" not found, creating new snapshot.')
            self._create_snapshot(row)

        self._transition(WorkflowState.SNAPSHOT_PENDING, f"Waiting on snapshot '{self.signature}'.")

    def _create_snapshot(self, row: Locator) -> None:
        comment = self.page.get_by_label("Comment")
        comment.click()
        comment.fill(self.signature)
        self.page.get_by_role("button", name="Start database snapshot").click()
        try:
            row.wait_for(state="visible", timeout=CREATION_CONFIRM_TIMEOUT_MS)
        except PlaywrightTimeoutError:
            self.logger.warning(
                f"Snapshot '{self.signature}' not listed {CREATION_CONFIRM_TIMEOUT_MS} ms after creation; polling anyway."
            )

    def wait_until_ready(self) -> Locator:
        waited_ms = 0
        while True:
            download_link = self._snapshot_row().get_by_role("link", name="download")
            if download_link.is_visible():
                self._transition(WorkflowState.SNAPSHOT_READY, f"Snapshot '{self.signature}' is ready.")
                return download_link

            self.logger.info(f"Waiting for '{self.signature}' to complete.")
            waited_ms += POLL_INTERVAL_MS
            if waited_ms >= READY_TIMEOUT_MS:
                raise SnapshotTimeoutError(
                    f"Timeout: download link for '{self.signature}' did not appear within 10 minutes"
                )
            self.page.wait_for_timeout(POLL_INTERVAL_MS)
            self.page.reload()

    def download(self, download_link: Locator) -> Path:
        self.logger.info(f"Downloading '{self.signature}' to {self.output_dir}")
        with self.page.expect_download(timeout=self.settings.download_timeout_ms) as download_info:
            download_link.click()
        download = download_info.value

        self._transition(WorkflowState.DOWNLOADING, f"Saving {download.suggested_filename}.")
        target = self.output_dir / download.suggested_filename
        download.save_as(target)
        self.logger.info("Download finished.", extra={"extra": {"path": str(target)}})
        return target

    def run(self) -> Path:
        self.login()
        self.open_snapshot_listing()
        self.locate_or_create_snapshot()
        download_link = self.wait_until_ready()
        target = self.download(download_link)
        self._transition(WorkflowState.DONE, "Snapshot workflow complete.")
        return target


def download_snapshot(
    *,
    credentials: Credentials,
    console_url: str,
    output_dir: Path,
    settings: Settings | None = None,
    logger: logging.Logger | None = None,
) -> Path:
    settings = settings or get_settings()

    with sync_playwright() as p:
        browser = p.chromium.launch(headless=settings.browser_headless)
        try:
            context = browser.new_context(accept_downloads=True)
            page = context.new_page()
            page.set_default_timeout(settings.browser_timeout_ms)
            workflow = SnapshotWorkflow(
                page,
                credentials=credentials,
                console_url=console_url,
                output_dir=output_dir,
                settings=settings,
                logger=logger,
            )
            return workflow.run()
        finally:
            browser.close()
