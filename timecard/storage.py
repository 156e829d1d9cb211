from __future__ import annotations
import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .codec import timesheet_from_dict, timesheet_to_dict
from .core.logging import get_logger
from .errors import CodecError
from .models import TEMPLATE_LABEL, PayPeriodTimesheet

logger = get_logger(__name__)

TEMPLATE_FILENAME = "template.json"


@dataclass
class SaveResult:
    success: bool
    path: Optional[Path] = None
    error: Optional[str] = None


def filename_for(label: str) -> str:
    if label == TEMPLATE_LABEL:
        return TEMPLATE_FILENAME
    return f"timesheet-{label.replace('/', '-')}.json"


class TimesheetStore:
    """One JSON file per pay-period label under ``directory``."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def path_for(self, label: str) -> Path:
        return self.directory / filename_for(label)

    def exists(self, label: str) -> bool:
        return bool(label) and self.path_for(label).exists()

    def save(self, label: str, timesheet: PayPeriodTimesheet) -> SaveResult:
        if not label:
            return SaveResult(success=False, error="No pay period selected")
        path = self.path_for(label)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(timesheet_to_dict(timesheet), indent=2))
        except OSError as exc:
            logger.error("timesheet_save_failed", label=label, path=str(path), error=str(exc))
            return SaveResult(success=False, path=path, error=str(exc))
        logger.info("timesheet_saved", label=label, path=str(path))
        return SaveResult(success=True, path=path)

    def load(self, label: str) -> Optional[PayPeriodTimesheet]:
        if not self.exists(label):
            return None
        return self.load_file(self.path_for(label))

    def load_file(self, path: Path) -> Optional[PayPeriodTimesheet]:
        """Read a saved timesheet; unreadable or malformed files load as absent."""
        try:
            content = json.loads(path.read_text())
            return timesheet_from_dict(content)
        except (OSError, ValueError, CodecError) as exc:
            logger.warning("timesheet_load_failed", path=str(path), error=str(exc))
            return None

    def list_labels(self) -> List[str]:
        labels = []
        for path in sorted(self.directory.glob("*.json")):
            timesheet = self.load_file(path)
            if timesheet is not None:
                labels.append(timesheet.pay_period_label or path.stem)
        return labels
