"""
Ingestion boundary: raw spreadsheet rows in, strict entities out.

Everything loosely typed stops here. Rows come from CSV exports of the
program's spreadsheets (Spanish column names) or from SQL tables (English
column names); both are accepted. Malformed values never raise: they are
defaulted and logged so the derived state can always be computed.
"""

import csv
import io
import logging
import re
from datetime import datetime, timezone

from rewards_engine.schemas.recognition import RecognitionEvent
from rewards_engine.schemas.redemption import RedemptionRecord, RedemptionStatus
from rewards_engine.schemas.reward import RewardDefinition
from rewards_engine.schemas.snapshot import Snapshot
from rewards_engine.schemas.user import User, UserRole, UserStatus


logger = logging.getLogger(__name__)


USER_FIELDS = {
    "id": ("usuario_id", "user_id", "id"),
    "name": ("nombre", "name"),
    "email": ("email", "correo"),
    "status": ("estado", "status"),
    "role": ("rol_otorgador", "rol", "role"),
    "historical_points": ("puntos_anteriores", "historical_points"),
    "created_at": ("fecha_creacion", "created_at"),
}

RECOGNITION_FIELDS = {
    "id": ("aplauso_id", "recognition_id", "id"),
    "giver_id": ("otorgante_id", "giver_id"),
    "receiver_id": ("receptor_id", "receiver_id"),
    "principle": ("principio", "principle"),
    "reason": ("motivo", "reason"),
    "timestamp": ("fecha", "timestamp"),
}

REWARD_FIELDS = {
    "id": ("recompensa_id", "reward_id", "id"),
    "name": ("nombre", "name"),
    "description": ("descripcion", "description"),
    "required_level": ("nivel_requerido", "required_level"),
    "initial_stock": ("stock", "initial_stock"),
    "point_cost": ("puntos_costo", "point_cost"),
    "image_url": ("imagen_url", "image_url"),
}

REDEMPTION_FIELDS = {
    "id": ("canje_id", "redemption_id", "id"),
    "user_id": ("usuario_id", "user_id"),
    "reward_id": ("recompensa_id", "reward_id"),
    "timestamp": ("fecha", "timestamp"),
    "status": ("estado", "status"),
    "required_points": ("puntos_requeridos", "required_points"),
    "points_before": ("puntos_previos", "points_before"),
    "points_after": ("puntos_restantes", "points_after"),
    "notes": ("observaciones", "notes"),
}

_ADMIN_ROLES = {"administrador", "admin"}
_CONTRIBUTOR_ROLES = {"colaborador", "contributor", "lector", ""}

_REDEMPTION_STATUSES = {
    "pendiente": RedemptionStatus.PENDING,
    "pending": RedemptionStatus.PENDING,
    "aprobado": RedemptionStatus.APPROVED,
    "approved": RedemptionStatus.APPROVED,
    "rechazado": RedemptionStatus.REJECTED,
    "rejected": RedemptionStatus.REJECTED,
}

_SPANISH_STATUS_LABELS = {
    RedemptionStatus.PENDING: "Pendiente",
    RedemptionStatus.APPROVED: "Aprobado",
    RedemptionStatus.REJECTED: "Rechazado",
}

_DMY_RE = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{4})$")


# ============================================================
# Low level helpers
# ============================================================
def normalize_header(header: str) -> str:
    h = (header or "").strip().strip('"').replace("\ufeff", "").lower()
    h = re.sub(r"[^a-z0-9_]", "_", h)
    h = re.sub(r"_+", "_", h)
    return h.rstrip("_")


def parse_csv_text(text: str) -> list[dict]:
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    if not reader.fieldnames:
        return []
    reader.fieldnames = [normalize_header(h) for h in reader.fieldnames]

    rows = []
    for row in reader:
        rows.append({k: (v or "").strip() for k, v in row.items() if k})
    return rows


def _pick(row: dict, keys: tuple[str, ...]):
    for key in keys:
        value = row.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def _as_str(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_int(value, *, field: str, row_id: str = "", minimum: int | None = None) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0

    try:
        result = int(value)
    except (TypeError, ValueError):
        try:
            result = int(float(str(value).strip()))
        # "inf", "1e999" and over-long digit strings end up as float infinity
        except (TypeError, ValueError, OverflowError):
            logger.warning("malformed numeric field, using 0", extra={"field": field, "row_id": row_id, "value": value})
            return 0

    if minimum is not None and result < minimum:
        logger.warning(
            "numeric field below minimum, clamping",
            extra={"field": field, "row_id": row_id, "value": result, "minimum": minimum},
        )
        return minimum
    return result


def _parse_optional_int(value, *, field: str, row_id: str = "") -> int | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_int(value, field=field, row_id=row_id)


def parse_date(value) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    text = str(value).strip()
    if not text:
        return None

    iso = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        parsed = datetime.fromisoformat(iso)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    except ValueError:
        pass

    date_part = text.split(" ")[0]
    m = _DMY_RE.match(date_part)
    if m:
        day, month, year = (int(g) for g in m.groups())
        try:
            return datetime(year, month, day, tzinfo=timezone.utc)
        except ValueError:
            return None

    return None


def _parse_timestamp(value, *, entity: str, row_id: str) -> datetime | None:
    parsed = parse_date(value)
    if parsed is None and value not in (None, ""):
        logger.warning("unparseable date", extra={"entity": entity, "row_id": row_id, "value": value})
    return parsed


def parse_role(value) -> UserRole:
    raw = _as_str(value).lower()
    if raw in _ADMIN_ROLES:
        return UserRole.ADMIN
    if raw in _CONTRIBUTOR_ROLES:
        return UserRole.CONTRIBUTOR
    return UserRole.GRANTER


def parse_user_status(value) -> UserStatus:
    raw = _as_str(value).lower()
    return UserStatus.ACTIVE if raw in {"activo", "active"} else UserStatus.INACTIVE


def parse_redemption_status(value) -> RedemptionStatus:
    return _REDEMPTION_STATUSES.get(_as_str(value).lower(), RedemptionStatus.UNSPECIFIED)


# ============================================================
# Entities
# ============================================================
def _with_ids(rows, fields: dict, entity: str):
    for idx, row in enumerate(rows, start=1):
        row_id = _as_str(_pick(row, fields["id"]))
        if not row_id:
            logger.warning("skipping row without id", extra={"entity": entity, "line": idx})
            continue
        yield row_id, row


def parse_users(rows) -> list[User]:
    users = []
    for row_id, row in _with_ids(rows, USER_FIELDS, "user"):
        users.append(
            User(
                id=row_id,
                name=_as_str(_pick(row, USER_FIELDS["name"])),
                email=_as_str(_pick(row, USER_FIELDS["email"])),
                status=parse_user_status(_pick(row, USER_FIELDS["status"])),
                role=parse_role(_pick(row, USER_FIELDS["role"])),
                historical_points=parse_int(
                    _pick(row, USER_FIELDS["historical_points"]), field="historical_points", row_id=row_id
                ),
                created_at=_parse_timestamp(_pick(row, USER_FIELDS["created_at"]), entity="user", row_id=row_id),
            )
        )
    return users


def parse_recognitions(rows) -> list[RecognitionEvent]:
    events = []
    for row_id, row in _with_ids(rows, RECOGNITION_FIELDS, "recognition"):
        events.append(
            RecognitionEvent(
                id=row_id,
                giver_id=_as_str(_pick(row, RECOGNITION_FIELDS["giver_id"])),
                receiver_id=_as_str(_pick(row, RECOGNITION_FIELDS["receiver_id"])),
                principle=_as_str(_pick(row, RECOGNITION_FIELDS["principle"])),
                reason=_as_str(_pick(row, RECOGNITION_FIELDS["reason"])),
                timestamp=_parse_timestamp(
                    _pick(row, RECOGNITION_FIELDS["timestamp"]), entity="recognition", row_id=row_id
                ),
            )
        )
    return events


def parse_rewards(rows) -> list[RewardDefinition]:
    rewards = []
    for row_id, row in _with_ids(rows, REWARD_FIELDS, "reward"):
        rewards.append(
            RewardDefinition(
                id=row_id,
                name=_as_str(_pick(row, REWARD_FIELDS["name"])),
                description=_as_str(_pick(row, REWARD_FIELDS["description"])),
                required_level=parse_int(
                    _pick(row, REWARD_FIELDS["required_level"]), field="required_level", row_id=row_id, minimum=0
                ),
                initial_stock=parse_int(
                    _pick(row, REWARD_FIELDS["initial_stock"]), field="initial_stock", row_id=row_id, minimum=0
                ),
                point_cost=parse_int(
                    _pick(row, REWARD_FIELDS["point_cost"]), field="point_cost", row_id=row_id, minimum=0
                ),
                image_url=_as_str(_pick(row, REWARD_FIELDS["image_url"])) or None,
            )
        )
    return rewards


def parse_redemptions(rows) -> list[RedemptionRecord]:
    records = []
    for row_id, row in _with_ids(rows, REDEMPTION_FIELDS, "redemption"):
        records.append(
            RedemptionRecord(
                id=row_id,
                user_id=_as_str(_pick(row, REDEMPTION_FIELDS["user_id"])),
                reward_id=_as_str(_pick(row, REDEMPTION_FIELDS["reward_id"])),
                timestamp=_parse_timestamp(
                    _pick(row, REDEMPTION_FIELDS["timestamp"]), entity="redemption", row_id=row_id
                ),
                status=parse_redemption_status(_pick(row, REDEMPTION_FIELDS["status"])),
                required_points=_parse_optional_int(
                    _pick(row, REDEMPTION_FIELDS["required_points"]), field="required_points", row_id=row_id
                ),
                points_before=_parse_optional_int(
                    _pick(row, REDEMPTION_FIELDS["points_before"]), field="points_before", row_id=row_id
                ),
                points_after=_parse_optional_int(
                    _pick(row, REDEMPTION_FIELDS["points_after"]), field="points_after", row_id=row_id
                ),
                notes=_as_str(_pick(row, REDEMPTION_FIELDS["notes"])) or None,
            )
        )
    return records


def build_snapshot(*, users=(), recognitions=(), rewards=(), redemptions=(), version: int = 0) -> Snapshot:
    return Snapshot(
        users=parse_users(users),
        recognitions=parse_recognitions(recognitions),
        rewards=parse_rewards(rewards),
        redemptions=parse_redemptions(redemptions),
        loaded_at=datetime.now(timezone.utc),
        version=version,
    )


def _status_for_column(status: RedemptionStatus, column: str) -> str:
    # Spanish-headed logs are read by the Spanish approval workflow
    if column == REDEMPTION_FIELDS["status"][0]:
        return _SPANISH_STATUS_LABELS.get(status, "")
    return status.value


def redemption_to_row(record: RedemptionRecord, columns: list[str] | None = None) -> dict:
    """
    Row for appending ``record`` to an external redemption log.

    With ``columns`` (the log's existing header, normalized), values are laid
    out under whichever alias the log already uses. Without them the Spanish
    spreadsheet layout is used.
    """
    values = {
        "id": record.id,
        "user_id": record.user_id,
        "reward_id": record.reward_id,
        "timestamp": record.timestamp.isoformat() if record.timestamp else "",
        "required_points": "" if record.required_points is None else str(record.required_points),
        "points_before": "" if record.points_before is None else str(record.points_before),
        "points_after": "" if record.points_after is None else str(record.points_after),
        "notes": record.notes or "",
    }

    if not columns:
        columns = [aliases[0] for aliases in REDEMPTION_FIELDS.values()]

    row = {}
    for column in columns:
        row[column] = ""
        for key, aliases in REDEMPTION_FIELDS.items():
            if column in aliases:
                row[column] = _status_for_column(record.status, column) if key == "status" else values[key]
                break
    return row
