import csv
import logging
import os
import threading
from typing import Protocol

from sqlalchemy import inspect as sa_inspect

from rewards_engine.errors import SnapshotLoadError
from rewards_engine.models.recognition import Recognition
from rewards_engine.models.redemption import Redemption
from rewards_engine.models.reward import Reward
from rewards_engine.models.user import User as UserModel
from rewards_engine.schemas.recognition import RecognitionEvent
from rewards_engine.schemas.redemption import RedemptionRecord
from rewards_engine.schemas.reward import RewardDefinition
from rewards_engine.schemas.snapshot import Snapshot
from rewards_engine.schemas.user import User
from rewards_engine.services.ingestion_service import (
    build_snapshot,
    normalize_header,
    parse_csv_text,
    redemption_to_row,
)


logger = logging.getLogger(__name__)


class SnapshotSource(Protocol):
    def load(self) -> Snapshot:
        ...

    def append_redemption(self, record: RedemptionRecord) -> None:
        ...


# ============================================================
# CSV directory (spreadsheet exports)
# ============================================================
class CsvDirectorySource:
    """
    Reads users.csv, recognitions.csv, rewards.csv and redemptions.csv from
    one directory. A missing redemptions.csv means an empty log; it is
    created on the first append.
    """

    FILES = {
        "users": "users.csv",
        "recognitions": "recognitions.csv",
        "rewards": "rewards.csv",
        "redemptions": "redemptions.csv",
    }
    OPTIONAL = {"redemptions"}

    def __init__(self, directory: str, files: dict | None = None):
        self.directory = directory
        self.files = {**self.FILES, **(files or {})}
        self._write_lock = threading.Lock()

    def _path(self, kind: str) -> str:
        return os.path.join(self.directory, self.files[kind])

    def _read_rows(self, kind: str) -> list[dict]:
        path = self._path(kind)
        if not os.path.exists(path):
            if kind in self.OPTIONAL:
                return []
            raise SnapshotLoadError(f"Missing {kind} file: {path}")

        try:
            with open(path, "r", encoding="utf-8-sig", newline="") as fh:
                return parse_csv_text(fh.read())
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise SnapshotLoadError(f"Could not read {kind} file {path}: {e}") from e

    def load(self) -> Snapshot:
        return build_snapshot(
            users=self._read_rows("users"),
            recognitions=self._read_rows("recognitions"),
            rewards=self._read_rows("rewards"),
            redemptions=self._read_rows("redemptions"),
        )

    def append_redemption(self, record: RedemptionRecord) -> None:
        path = self._path("redemptions")

        with self._write_lock:
            header = None
            if os.path.exists(path) and os.path.getsize(path) > 0:
                with open(path, "r", encoding="utf-8-sig", newline="") as fh:
                    header = next(csv.reader(fh), None)

            if header:
                normalized = [normalize_header(h) for h in header]
                by_normalized = redemption_to_row(record, normalized)
                row = [by_normalized[n] for n in normalized]
                with open(path, "rb") as fh:
                    fh.seek(-1, os.SEEK_END)
                    needs_newline = fh.read(1) not in (b"\n", b"\r")
                with open(path, "a", encoding="utf-8", newline="") as fh:
                    if needs_newline:
                        fh.write("\r\n")
                    csv.writer(fh).writerow(row)
            else:
                data = redemption_to_row(record)
                with open(path, "w", encoding="utf-8", newline="") as fh:
                    writer = csv.DictWriter(fh, fieldnames=list(data.keys()))
                    writer.writeheader()
                    writer.writerow(data)

        logger.info("redemption appended to csv log", extra={"redemption_id": record.id, "path": path})


# ============================================================
# SQL tables owned by the external store
# ============================================================
def _row_to_dict(obj) -> dict:
    return {attr.key: getattr(obj, attr.key) for attr in sa_inspect(obj).mapper.column_attrs}


class SqlSnapshotSource:
    def __init__(self, session_factory=None):
        if session_factory is None:
            from rewards_engine.db import SessionLocal

            session_factory = SessionLocal
        self.session_factory = session_factory

    def load(self) -> Snapshot:
        db = self.session_factory()
        try:
            return build_snapshot(
                users=[_row_to_dict(u) for u in db.query(UserModel).all()],
                recognitions=[_row_to_dict(r) for r in db.query(Recognition).all()],
                rewards=[_row_to_dict(r) for r in db.query(Reward).all()],
                redemptions=[_row_to_dict(r) for r in db.query(Redemption).all()],
            )
        except Exception as e:
            raise SnapshotLoadError(f"Could not load snapshot from database: {e}") from e
        finally:
            db.close()

    def append_redemption(self, record: RedemptionRecord) -> None:
        db = self.session_factory()
        try:
            db.add(
                Redemption(
                    id=record.id,
                    user_id=record.user_id,
                    reward_id=record.reward_id,
                    timestamp=record.timestamp.replace(tzinfo=None) if record.timestamp else None,
                    status=record.status.value,
                    required_points=record.required_points,
                    points_before=record.points_before,
                    points_after=record.points_after,
                    notes=record.notes,
                )
            )
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

        logger.info("redemption inserted", extra={"redemption_id": record.id})


# ============================================================
# In memory (fixtures, tests)
# ============================================================
class InMemorySource:
    def __init__(
        self,
        users: list[User] | None = None,
        recognitions: list[RecognitionEvent] | None = None,
        rewards: list[RewardDefinition] | None = None,
        redemptions: list[RedemptionRecord] | None = None,
    ):
        self.users = list(users or [])
        self.recognitions = list(recognitions or [])
        self.rewards = list(rewards or [])
        self.redemptions = list(redemptions or [])

    def load(self) -> Snapshot:
        return Snapshot(
            users=list(self.users),
            recognitions=list(self.recognitions),
            rewards=list(self.rewards),
            redemptions=list(self.redemptions),
        )

    def append_redemption(self, record: RedemptionRecord) -> None:
        self.redemptions.append(record)


def build_source(settings) -> SnapshotSource:
    if settings.snapshot_source == "sql":
        return SqlSnapshotSource()
    if settings.snapshot_source == "memory":
        return InMemorySource()
    return CsvDirectorySource(settings.snapshot_csv_dir)
