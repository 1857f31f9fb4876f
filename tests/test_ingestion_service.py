from datetime import datetime, timezone

import pytest

from rewards_engine.schemas.redemption import RedemptionRecord, RedemptionStatus
from rewards_engine.schemas.user import UserRole, UserStatus
from rewards_engine.services.ingestion_service import (
    build_snapshot,
    normalize_header,
    parse_csv_text,
    parse_date,
    parse_int,
    parse_redemptions,
    parse_rewards,
    parse_role,
    parse_users,
    redemption_to_row,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("usuario_id", "usuario_id"),
        ("\ufeffUsuario ID", "usuario_id"),
        ('"Estado:"', "estado"),
        ("Puntos  Costo", "puntos_costo"),
        (" rol-otorgador ", "rol_otorgador"),
    ],
)
def test_normalize_header(raw, expected):
    assert normalize_header(raw) == expected


def test_parse_csv_text_handles_quoted_commas_and_bom():
    text = '\ufeffAplauso ID,Motivo\napp-1,"Gran trabajo, de verdad"\n'
    rows = parse_csv_text(text)
    assert rows == [{"aplauso_id": "app-1", "motivo": "Gran trabajo, de verdad"}]


def test_parse_csv_text_empty():
    assert parse_csv_text("") == []


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("2024-03-05T10:00:00Z", datetime(2024, 3, 5, 10, tzinfo=timezone.utc)),
        ("2024-03-05", datetime(2024, 3, 5, tzinfo=timezone.utc)),
        ("05/03/2024", datetime(2024, 3, 5, tzinfo=timezone.utc)),
        ("5-3-2024 14:22", datetime(2024, 3, 5, tzinfo=timezone.utc)),
        ("31/02/2024", None),
        ("mañana", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_date(raw, expected):
    assert parse_date(raw) == expected


def test_parse_int_defaults_malformed_values(caplog):
    with caplog.at_level("WARNING"):
        assert parse_int("abc", field="point_cost") == 0
    assert "malformed numeric field" in caplog.text
    assert parse_int("", field="point_cost") == 0
    assert parse_int(None, field="point_cost") == 0
    assert parse_int("300", field="point_cost") == 300
    assert parse_int("12.0", field="stock") == 12
    assert parse_int("-4", field="stock", minimum=0) == 0


@pytest.mark.parametrize("raw", ["inf", "Infinity", "-inf", "1e999", "nan", "9" * 5000])
def test_parse_int_non_finite_values_default_to_zero(raw, caplog):
    with caplog.at_level("WARNING"):
        assert parse_int(raw, field="initial_stock", row_id="rw-1") == 0
    assert "malformed numeric field" in caplog.text


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Administrador", UserRole.ADMIN),
        ("admin", UserRole.ADMIN),
        ("Colaborador", UserRole.CONTRIBUTOR),
        ("lector", UserRole.CONTRIBUTOR),
        ("", UserRole.CONTRIBUTOR),
        (None, UserRole.CONTRIBUTOR),
        ("Otorgador", UserRole.GRANTER),
        ("Editor", UserRole.GRANTER),
    ],
)
def test_parse_role(raw, expected):
    assert parse_role(raw) == expected


def test_parse_users():
    users = parse_users(
        [
            {"usuario_id": "u-1", "nombre": "Ana", "estado": "Activo", "rol": "Otorgador", "puntos_anteriores": "250"},
            {"usuario_id": "u-2", "nombre": "Luis", "estado": "inactivo", "puntos_anteriores": "n/a"},
            {"usuario_id": "", "nombre": "Sin id"},
        ]
    )
    assert [u.id for u in users] == ["u-1", "u-2"]
    assert users[0].status == UserStatus.ACTIVE
    assert users[0].role == UserRole.GRANTER
    assert users[0].historical_points == 250
    assert users[1].status == UserStatus.INACTIVE
    assert users[1].historical_points == 0


def test_parse_rewards_defaults_bad_numbers():
    rewards = parse_rewards(
        [
            {"recompensa_id": " rw-1 ", "nombre": "Día libre", "nivel_requerido": "2", "stock": "x", "puntos_costo": "-50"},
            {"reward_id": "rw-2", "name": "Mug", "initial_stock": 3, "point_cost": 100, "required_level": None},
        ]
    )
    assert rewards[0].id == "rw-1"
    assert rewards[0].required_level == 2
    assert rewards[0].initial_stock == 0
    assert rewards[0].point_cost == 0
    assert rewards[1].initial_stock == 3
    assert rewards[1].required_level == 0


def test_parse_redemption_statuses():
    records = parse_redemptions(
        [
            {"canje_id": "r1", "usuario_id": "u", "recompensa_id": "rw", "estado": " Rechazado "},
            {"canje_id": "r2", "usuario_id": "u", "recompensa_id": "rw", "estado": "Aprobado"},
            {"canje_id": "r3", "usuario_id": "u", "recompensa_id": "rw", "estado": "Pendiente"},
            {"canje_id": "r4", "usuario_id": "u", "recompensa_id": "rw", "estado": "En revisión"},
            {"canje_id": "r5", "usuario_id": "u", "recompensa_id": "rw"},
        ]
    )
    assert [r.status for r in records] == [
        RedemptionStatus.REJECTED,
        RedemptionStatus.APPROVED,
        RedemptionStatus.PENDING,
        RedemptionStatus.UNSPECIFIED,
        RedemptionStatus.UNSPECIFIED,
    ]


def test_build_snapshot_from_rows():
    snapshot = build_snapshot(
        users=[{"usuario_id": "u-1", "estado": "activo"}],
        recognitions=[
            {"aplauso_id": "a-1", "otorgante_id": "u-2", "receptor_id": "u-1", "principio": "Excelencia", "fecha": "01/02/2024"}
        ],
    )
    assert len(snapshot.users) == 1
    assert snapshot.recognitions[0].timestamp == datetime(2024, 2, 1, tzinfo=timezone.utc)
    assert snapshot.rewards == []
    assert snapshot.loaded_at is not None


def test_redemption_to_row_uses_existing_columns():
    record = RedemptionRecord(
        id="red-9",
        user_id="u-1",
        reward_id="rw-1",
        timestamp=datetime(2024, 5, 1, tzinfo=timezone.utc),
        status=RedemptionStatus.PENDING,
        required_points=300,
    )
    row = redemption_to_row(record, ["canje_id", "usuario_id", "recompensa_id", "estado", "comprobante_pdf_url"])
    assert row == {
        "canje_id": "red-9",
        "usuario_id": "u-1",
        "recompensa_id": "rw-1",
        "estado": "Pendiente",
        "comprobante_pdf_url": "",
    }

    default = redemption_to_row(record)
    assert default["canje_id"] == "red-9"
    assert default["estado"] == "Pendiente"
    assert default["puntos_requeridos"] == "300"
    assert default["fecha"] == "2024-05-01T00:00:00+00:00"


@pytest.mark.parametrize(
    "status,spanish",
    [
        (RedemptionStatus.PENDING, "Pendiente"),
        (RedemptionStatus.APPROVED, "Aprobado"),
        (RedemptionStatus.REJECTED, "Rechazado"),
        (RedemptionStatus.UNSPECIFIED, ""),
    ],
)
def test_redemption_status_vocabulary_follows_header_language(status, spanish):
    record = RedemptionRecord(id="red-1", user_id="u-1", reward_id="rw-1", status=status)

    assert redemption_to_row(record, ["canje_id", "estado"])["estado"] == spanish
    assert redemption_to_row(record, ["redemption_id", "status"])["status"] == status.value


def test_spanish_status_reads_back_as_the_same_status():
    record = RedemptionRecord(id="red-1", user_id="u-1", reward_id="rw-1", status=RedemptionStatus.PENDING)
    parsed = parse_redemptions([redemption_to_row(record)])
    assert parsed[0].status == RedemptionStatus.PENDING
