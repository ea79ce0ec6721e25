"""Tests for body measurements, progress check-ins and weight metrics."""
from datetime import date
from types import SimpleNamespace

import pytest

from core.exceptions import NotFoundError, PermissionDeniedError
from schemas.measurement_schema import BodyMeasurementRequest, ProgressRecordRequest
from services import measurement_service


def _record(day, weight, id=None):
    return SimpleNamespace(id=id or day, date=date(2026, 1, day), weight=weight)


def test_measurement_bmi_and_category(db, make_user, make_client):
    nutritionist = make_user("nutritionist")
    client, _ = make_client(nutritionist)
    m = measurement_service.add_measurement(db, nutritionist, client.id, BodyMeasurementRequest(
        date=date(2026, 1, 10), weight=95, height=175, waist=102))
    res = measurement_service.measurement_to_response(m)
    assert res.bmi == 31.02
    assert res.bmi_category == "obese"
    assert res.created_by == nutritionist.user_id


def test_measurement_with_zero_height_has_no_bmi(db, make_user, make_client):
    nutritionist = make_user("nutritionist")
    client, _ = make_client(nutritionist)
    m = measurement_service.add_measurement(db, nutritionist, client.id, BodyMeasurementRequest(
        date=date(2026, 1, 10), weight=70, height=0))
    assert m.bmi is None


def test_measurements_listed_newest_first_and_scoped(db, make_user, make_client):
    nutritionist = make_user("nutritionist")
    client, _ = make_client(nutritionist)
    other, _ = make_client(nutritionist)
    for day in (3, 9, 6):
        measurement_service.add_measurement(db, nutritionist, client.id, BodyMeasurementRequest(
            date=date(2026, 2, day), weight=70, height=170))
    listed = measurement_service.list_measurements(db, nutritionist, client.id)
    assert [m.date.day for m in listed] == [9, 6, 3]

    with pytest.raises(NotFoundError):
        measurement_service.delete_measurement(db, nutritionist, other.id, listed[0].id)
    with pytest.raises(PermissionDeniedError):
        measurement_service.list_measurements(db, make_user("trainer"), client.id)


def test_latest_weigh_in_updates_profile_weight(db, make_user, make_client):
    nutritionist = make_user("nutritionist")
    client, _ = make_client(nutritionist, weight=80)
    measurement_service.add_progress_record(db, nutritionist, client.id,
                                            ProgressRecordRequest(date=date(2026, 3, 10), weight=78))
    assert client.weight == 78
    # A back-dated check-in does not overwrite the newer weight.
    measurement_service.add_progress_record(db, nutritionist, client.id,
                                            ProgressRecordRequest(date=date(2026, 3, 1), weight=81))
    db.refresh(client)
    assert client.weight == 78


def test_weight_trend_is_relative_to_goal():
    losing = [_record(1, 82), _record(8, 80.5)]
    metrics = measurement_service.weight_metrics(losing, "lose", 75)
    assert metrics.latest_weight == 80.5
    assert metrics.weight_difference == -1.5
    assert metrics.weight_trend == "up"

    assert measurement_service.weight_metrics(losing, "gain", 90).weight_trend == "down"
    assert measurement_service.weight_metrics(losing, "maintain", None).weight_trend == "neutral"


def test_weight_metrics_without_weigh_ins_fall_back_to_target():
    metrics = measurement_service.weight_metrics([_record(1, None)], "lose", 70)
    assert metrics.latest_weight == 70
    assert metrics.weight_difference == 0
    assert metrics.weight_trend == "neutral"


def test_weight_series_keeps_last_ten_in_date_order():
    records = [_record(day, 90 - day) for day in range(15, 0, -1)]
    series = measurement_service.weight_series(records)
    assert len(series) == 10
    assert series[0].date == "2026-01-06"
    assert series[-1].weight == 75


def test_progress_summary_for_client_view(db, make_user, make_client):
    nutritionist = make_user("nutritionist")
    client, client_ctx = make_client(nutritionist, weight_goal="gain", target_weight=70)
    for day, weight in ((1, 64), (15, 65.2)):
        measurement_service.add_progress_record(db, nutritionist, client.id,
                                                ProgressRecordRequest(date=date(2026, 4, day), weight=weight))
    summary = measurement_service.progress_summary(db, client_ctx, client.id)
    assert summary.metrics.weight_trend == "up"
    assert summary.metrics.weight_difference == 1.2
    assert [p.weight for p in summary.weight_series] == [64, 65.2]
