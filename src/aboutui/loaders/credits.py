"""
Credits loaders (ChromeOS).

OS credits are a file installed with the OS. Crostini credits live inside
the Termina component, which has to be mounted before the file exists.
Both hosts also serve the shared keyboard_utils.js script straight from
the resource bundle, without touching the disk.
"""

import logging
from pathlib import Path
from typing import Optional

from ..collaborators import ComponentError, MessageId, MountPolicy, ResourceId, UpdatePolicy
from ..core.thread_pool import TaskPriority
from ..source.constants import KEYBOARD_UTILS_PATH, TERMINA_COMPONENT_NAME, TERMINA_CREDITS_PATH
from ..source.response import Content
from .base import ContentLoader


logger = logging.getLogger(__name__)


class _CreditsLoader(ContentLoader):
    priority = TaskPriority.BEST_EFFORT

    @property
    def wants_keyboard_utils(self) -> bool:
        return self.path == KEYBOARD_UTILS_PATH

    def _respond_with_keyboard_utils(self) -> None:
        self._respond_now(
            self.collaborators.resources.load_resource_string(ResourceId.KEYBOARD_UTILS_JS)
        )

    def _read(self, path) -> bytes:
        ok, contents = self.collaborators.file_system.read_file(str(path))
        if not ok:
            logger.info(f"Credits file not available: {path}")
            return b""
        return contents


class OSCreditsLoader(_CreditsLoader):
    """OS credits from the fixed on-disk path, packaged copy as fallback."""

    def _begin(self) -> None:
        if self.wants_keyboard_utils:
            self._respond_with_keyboard_utils()
            return
        self._dispatch(lambda: self._read(self.env.os_credits_path))

    def _fallback_content(self) -> Content:
        if self.wants_keyboard_utils:
            return b""
        return self.collaborators.resources.load_resource_string(ResourceId.OS_CREDITS_HTML)


class CrostiniCreditsLoader(_CreditsLoader):
    """
    Linux (Crostini) credits from the mounted Termina component.

    No component manager, or a failed load, answers with the localized
    placeholder without reading anything.
    """

    def _begin(self) -> None:
        if self.wants_keyboard_utils:
            self._respond_with_keyboard_utils()
            return

        manager = self.collaborators.component_manager
        if manager is None:
            self._respond_now(b"")
            return

        manager.load(
            TERMINA_COMPONENT_NAME,
            MountPolicy.MOUNT,
            UpdatePolicy.SKIP,
            self._on_component_loaded,
        )

    def _on_component_loaded(self, error: ComponentError, mount_path: Optional[Path]) -> None:
        # The manager may answer from any thread.
        self.env.main.call(self._on_termina_loaded, error, mount_path)

    def _on_termina_loaded(self, error: ComponentError, mount_path: Optional[Path]) -> None:
        if error is not ComponentError.NONE or mount_path is None:
            logger.info(f"Termina component unavailable ({error.value}); using placeholder")
            self._respond_now(b"")
            return
        credits_path = Path(mount_path) / TERMINA_CREDITS_PATH
        self._dispatch(lambda: self._read(credits_path))

    def _fallback_content(self) -> Content:
        if self.wants_keyboard_utils:
            return b""
        return self.collaborators.strings.get_string(MessageId.CROSTINI_CREDITS_PLACEHOLDER)
