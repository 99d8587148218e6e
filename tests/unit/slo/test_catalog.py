"""Unit tests for SLOTarget validation and the SLOCatalog registry."""
from __future__ import annotations

import dataclasses

import pytest

from mp_reliability.kernel.errors import NotFoundError, ValidationError
from mp_reliability.slo import (
    DEFAULT_SLO_TARGETS,
    BusinessSeverity,
    SLOCatalog,
    SLOStatus,
    SLOTarget,
    SLOType,
    TimeWindow,
)


def make_target(name: str = "checkout_availability", target: float = 99.9, threshold: float = 99.0) -> SLOTarget:
    return SLOTarget.create(name, SLOType.AVAILABILITY, target, threshold, severity="high")


# ---------------------------------------------------------------------------
# SLOTarget
# ---------------------------------------------------------------------------


class TestSLOTarget:
    def test_create_derives_allowed_error_rate(self) -> None:
        target = make_target(target=99.5)
        assert target.error_budget.allowed_error_rate == pytest.approx(0.5)
        assert target.business_impact.severity is BusinessSeverity.HIGH

    def test_valid_target_has_no_errors(self) -> None:
        assert make_target().validation_errors() == []

    def test_target_must_exceed_threshold(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            make_target(target=99.0, threshold=99.0).validate()
        assert {"field": "target", "message": "must exceed threshold"} in exc_info.value.errors

    @pytest.mark.parametrize("target", [100.5, -1.0, float("nan")])
    def test_percentage_range(self, target: float) -> None:
        fields = {e["field"] for e in make_target(target=target, threshold=-5).validation_errors()}
        assert "target" in fields

    def test_window_must_be_positive(self) -> None:
        target = dataclasses.replace(make_target(), time_window=TimeWindow(duration_hours=0))
        fields = {e["field"] for e in target.validation_errors()}
        assert fields == {"time_window.duration_hours"}

    def test_critical_burn_rate_must_exceed_warning(self) -> None:
        target = SLOTarget.create(
            "x", "latency", 95, 90, critical_burn_rate=6.0, warning_burn_rate=6.0
        )
        fields = {e["field"] for e in target.validation_errors()}
        assert fields == {"error_budget.burn_rate_thresholds.critical"}


# ---------------------------------------------------------------------------
# SLOCatalog
# ---------------------------------------------------------------------------


class TestSLOCatalog:
    def test_default_catalog(self) -> None:
        catalog = SLOCatalog()
        assert len(catalog) == len(DEFAULT_SLO_TARGETS) == 5
        availability = catalog.get_or_raise("api_availability")
        assert availability.target == 99.5
        assert availability.threshold == 99.0
        assert availability.error_budget.allowed_error_rate == pytest.approx(0.5)
        assert catalog.get_or_raise("error_rate").time_window.duration_hours == 1

    def test_empty_catalog(self) -> None:
        assert len(SLOCatalog([])) == 0

    def test_register_and_replace_by_name(self) -> None:
        catalog = SLOCatalog([])
        catalog.register(make_target(target=99.9))
        catalog.register(make_target(target=99.95))
        assert len(catalog) == 1
        assert catalog.get_or_raise("checkout_availability").target == 99.95

    def test_invalid_registration_leaves_catalog_unchanged(self) -> None:
        catalog = SLOCatalog([make_target()])
        with pytest.raises(ValidationError):
            catalog.register(make_target(target=98.0, threshold=99.0))
        assert catalog.get_or_raise("checkout_availability").target == 99.9

    def test_replace_applies_changes(self) -> None:
        catalog = SLOCatalog()
        updated = catalog.replace("api_availability", description="edge traffic only")
        assert updated.description == "edge traffic only"
        assert catalog.get("api_availability") == updated

    def test_replace_validates(self) -> None:
        catalog = SLOCatalog()
        with pytest.raises(ValidationError):
            catalog.replace("api_availability", threshold=99.9)

    def test_replace_cannot_rename(self) -> None:
        catalog = SLOCatalog()
        with pytest.raises(ValidationError) as excinfo:
            catalog.replace("api_availability", name="other")
        assert excinfo.value.errors == [{"field": "name", "message": "must not change on replace"}]
        assert "other" not in catalog
        assert catalog.get("api_availability") is not None

    def test_remove(self) -> None:
        catalog = SLOCatalog()
        assert catalog.remove("response_time") is True
        assert catalog.remove("response_time") is False
        assert "response_time" not in catalog

    def test_get_or_raise_unknown(self) -> None:
        with pytest.raises(NotFoundError):
            SLOCatalog().get_or_raise("nope")
        assert SLOCatalog().get("nope") is None

    def test_by_severity(self) -> None:
        names = {t.name for t in SLOCatalog().by_severity("critical")}
        assert names == {"api_availability", "form_submission_success"}

    def test_targets_preserve_registration_order(self) -> None:
        assert [t.name for t in SLOCatalog().targets()] == [t.name for t in DEFAULT_SLO_TARGETS]

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(99.7, SLOStatus.HEALTHY), (99.2, SLOStatus.WARNING), (98.0, SLOStatus.BREACH)],
    )
    def test_evaluate(self, value: float, expected: SLOStatus) -> None:
        assert SLOCatalog().evaluate("api_availability", value) is expected
