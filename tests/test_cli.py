"""
Tests for the coicheck command-line interface.
"""
import json

import pytest

from coicheck.cli import main


TENANT = {
    "id": "tenant-001",
    "name": "Acme Catering LLC",
    "coi_coverage": {
        "generalLiability": {"amount": 500000, "aggregate": 2000000, "expirationDate": "2026-01-31"},
        "workersComp": {"amount": "Statutory", "expirationDate": "2026-01-31"},
        "employersLiability": {"amount": 1000000, "expirationDate": "2026-01-31"},
    },
    "coi_has_additional_insured": True,
    "coi_has_waiver_of_subrogation": True,
    "coi_expiration_date": "2026-01-31",
    "coi_uploaded_at": "2025-01-15T10:00:00Z",
}

VENDOR = {
    "id": "vendor-001",
    "name": "Bolt Electric",
    "coverage": {
        "generalLiability": {"amount": 1000000, "expirationDate": "2025-03-20"},
        "autoLiability": {"amount": 1000000, "expirationDate": "2025-12-31"},
    },
    "issues": [],
    "status": "compliant",
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, reset_logging):
    for name in (
        "COICHECK_EXPIRING_THRESHOLD_DAYS",
        "COICHECK_TEMPLATES_DIR",
        "COICHECK_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def write_json(tmp_path):
    def _write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return str(path)
    return _write


def run(capsys, *argv):
    code = main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out, captured.err


class TestEvaluate:
    """coicheck evaluate"""

    def test_with_profile_file(self, capsys, write_json):
        tenant = write_json("tenant.json", TENANT)
        profile = write_json("profile.json", {"gl_occurrence_limit": 1000000})

        code, out, err = run(capsys, "evaluate", tenant, "--profile", profile, "--today", "2025-03-01")

        assert code == 0
        result = json.loads(out)
        assert result["overallStatus"] == "non-compliant"
        assert result["issues"] == [{
            "type": "error",
            "message": "General Liability (Per Occurrence) $500,000 below required $1,000,000",
        }]

    def test_embedded_profile(self, capsys, write_json):
        tenant = write_json("tenant.json", {
            **TENANT,
            "requirement_profile": {"gl_occurrence_limit": 500000},
        })

        code, out, _ = run(capsys, "evaluate", tenant, "--today", "2025-03-01")

        assert code == 0
        assert json.loads(out)["overallStatus"] == "compliant"

    def test_without_profile_is_pending(self, capsys, write_json):
        tenant = write_json("tenant.json", TENANT)

        code, out, _ = run(capsys, "evaluate", tenant)

        assert code == 0
        result = json.loads(out)
        assert result["overallStatus"] == "pending"
        assert result["fields"] == []

    def test_with_template(self, capsys, write_json):
        tenant = write_json("tenant.json", TENANT)

        code, out, _ = run(
            capsys, "evaluate", tenant,
            "--template", "office",
            "--additional-insured", "Landlord LLC",
            "--today", "2025-03-01",
        )

        assert code == 0
        result = json.loads(out)
        names = [f["fieldName"] for f in result["fields"]]
        assert "additional_insured" in names
        assert "waiver_of_subrogation" in names
        assert result["overallStatus"] == "non-compliant"

    def test_threshold(self, capsys, write_json):
        tenant = write_json("tenant.json", TENANT)
        profile = write_json("profile.json", {"gl_occurrence_limit": 500000})

        _, out, _ = run(
            capsys, "evaluate", tenant, "--profile", profile,
            "--today", "2025-03-01", "--threshold", "400",
        )

        assert json.loads(out)["overallStatus"] == "expiring"

    def test_threshold_from_environment(self, capsys, write_json, monkeypatch):
        monkeypatch.setenv("COICHECK_EXPIRING_THRESHOLD_DAYS", "400")
        tenant = write_json("tenant.json", TENANT)
        profile = write_json("profile.json", {"gl_occurrence_limit": 500000})

        _, out, _ = run(capsys, "evaluate", tenant, "--profile", profile, "--today", "2025-03-01")

        assert json.loads(out)["overallStatus"] == "expiring"

    def test_missing_file(self, capsys, tmp_path):
        code, out, err = run(capsys, "evaluate", str(tmp_path / "nope.json"))

        assert code == 1
        assert out == ""
        assert "Cannot read" in err

    def test_invalid_json(self, capsys, tmp_path):
        path = tmp_path / "tenant.json"
        path.write_text("{not json")

        code, _, err = run(capsys, "evaluate", str(path))

        assert code == 1
        assert "Invalid JSON" in err

    def test_non_object_json(self, capsys, write_json):
        path = write_json("tenant.json", [1, 2, 3])

        code, _, err = run(capsys, "evaluate", path)

        assert code == 1
        assert "must contain a JSON object" in err

    def test_bad_today(self, capsys, write_json):
        tenant = write_json("tenant.json", TENANT)

        with pytest.raises(SystemExit) as exc_info:
            main(["evaluate", tenant, "--today", "03/01/2025"])

        assert exc_info.value.code == 2

    def test_bad_environment(self, capsys, write_json, monkeypatch):
        monkeypatch.setenv("COICHECK_EXPIRING_THRESHOLD_DAYS", "soon")
        tenant = write_json("tenant.json", TENANT)

        code, _, err = run(capsys, "evaluate", tenant)

        assert code == 1
        assert "COICHECK_EXPIRING_THRESHOLD_DAYS" in err


class TestVendorStatus:
    """coicheck vendor-status"""

    def test_recalculates(self, capsys, write_json):
        vendor = write_json("vendor.json", VENDOR)

        code, out, _ = run(capsys, "vendor-status", vendor, "--today", "2025-03-01")

        assert code == 0
        record = json.loads(out)
        assert record["status"] == "expiring"
        assert record["coverage"]["generalLiability"]["expiringSoon"] is True
        assert record["coverage"]["autoLiability"]["expiringSoon"] is False

    def test_threshold(self, capsys, write_json):
        vendor = write_json("vendor.json", VENDOR)

        _, out, _ = run(capsys, "vendor-status", vendor, "--today", "2025-03-01", "--threshold", "7")

        assert json.loads(out)["status"] == "compliant"


class TestTemplates:
    """coicheck templates"""

    def test_list(self, capsys):
        code, out, _ = run(capsys, "templates")

        assert code == 0
        lines = out.strip().splitlines()
        assert len(lines) == 6
        assert any(line.startswith("office") and "GL: $1M/$2M" in line for line in lines)

    def test_show(self, capsys):
        code, out, _ = run(capsys, "templates", "restaurant")

        assert code == 0
        data = json.loads(out)
        assert data["key"] == "restaurant"
        assert data["specialty"]["liquor_liability"] == 1000000
        assert data["summary"].startswith("GL: $1M/$2M")

    def test_unknown(self, capsys):
        code, out, err = run(capsys, "templates", "casino")

        assert code == 1
        assert out == ""
        assert "Template not found: casino" in err

    def test_templates_dir_override(self, capsys, tmp_path, monkeypatch):
        (tmp_path / "kiosk.yaml").write_text(
            "schema_version: '1.0.0'\nkey: kiosk\nname: Kiosk\n"
            "general_liability:\n  per_occurrence: 500000\n  aggregate: 1000000\n"
        )
        monkeypatch.setenv("COICHECK_TEMPLATES_DIR", str(tmp_path))

        code, out, _ = run(capsys, "templates")

        assert code == 0
        assert out.startswith("kiosk")
        assert "GL: $0.5M/$1M" in out


def test_no_command(capsys):
    code, out, _ = run(capsys)

    assert code == 1
    assert "usage" in out.lower()
