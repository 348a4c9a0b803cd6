"""Desktop integration: a Qt selection dialog and revealing project roots."""

from __future__ import annotations

import logging
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

from PySide6.QtCore import QUrl
from PySide6.QtGui import QDesktopServices
from PySide6.QtWidgets import QApplication, QInputDialog

logger = logging.getLogger(__name__)


class QtDialogStrategy:
    """Pick a label from a non-editable combo box in a modal dialog."""

    def __init__(self, title: str = "projx") -> None:
        self._title = title

    def select(self, prompt: str, labels: Sequence[str]) -> str | None:
        _ensure_application()
        item, ok = QInputDialog.getItem(
            None,  # type: ignore[arg-type]
            self._title,
            prompt,
            list(labels),
            0,
            False,
        )
        if not ok:
            return None
        return str(item)


def reveal_root(root: str) -> bool:
    """Show a project root in the system file manager."""
    target = Path(root).expanduser()
    if not target.is_dir():
        logger.info("Cannot reveal %s: not a directory", target)
        return False

    if sys.platform == "darwin":
        subprocess.Popen(["open", str(target)])
        return True
    if sys.platform == "win32":
        subprocess.Popen(["explorer", str(target)])
        return True

    _ensure_application()
    return QDesktopServices.openUrl(QUrl.fromLocalFile(str(target)))


def _ensure_application() -> QApplication:
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv[:1])
    return app  # type: ignore[return-value]
