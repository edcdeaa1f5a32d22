from dataclasses import fields

from directory_sync.models.coercion import as_float, as_int, as_str
from directory_sync.models.contact import EmergencyContact
from directory_sync.models.school import SchoolRecord

from conftest import make_school


def test_coercion_helpers():
    assert as_str(None) == ""
    assert as_str(12) == "12"
    assert as_str(12.0) == "12"
    assert as_str(12.5) == "12.5"

    assert as_int("42") == 42
    assert as_int(" 42 ") == 42
    assert as_int("42.9") == 42
    assert as_int(41.7) == 41
    assert as_int("n/a") == 0
    assert as_int(None, 5) == 5
    assert as_int(True) == 0
    assert as_int(float("inf")) == 0

    assert as_float("25.77") == 25.77
    assert as_float(25) == 25.0
    assert as_float("north") == 0.0


def test_school_record_parses_loose_payload():
    record = SchoolRecord.from_dict(
        {
            "id": 1,
            "schoolNumber": 17,
            "schoolName": "Bandabil Govt. Primary School",
            "latitude": "25.789",
            "longitude": 89,
            "maleStudents": "120",
            "femaleStudents": 110.0,
            "totalStudents": "230",
            "dailyAttendance": None,
            "policeMobile": 1987654321,
            "unexpected": "ignored",
        }
    )

    assert record.id == "1"
    assert record.school_number == "17"
    assert record.latitude == 25.789
    assert record.longitude == 89.0
    assert record.male_students == 120
    assert record.female_students == 110
    assert record.total_students == 230
    assert record.daily_attendance == 0
    assert record.police_mobile == "1987654321"
    assert record.headmaster_name == ""


def test_school_record_field_types_follow_declared_defaults():
    record = SchoolRecord.from_dict(
        {
            "latitude": "23.5",
            "longitude": "90",
            "maleStudents": "12",
            "femaleStudents": "13.0",
            "totalStudents": 25.0,
            "dailyAttendance": "20",
            "schoolNumber": 9,
            "lastUpdated": 1700000000,
        }
    )

    for spec in fields(SchoolRecord):
        assert type(getattr(record, spec.name)) is type(spec.default), spec.name

def test_school_record_dict_round_trip():
    record = make_school(5, policeName="SI Karim", asstHeadmasterMobile="01812345678")
    assert SchoolRecord.from_dict(record.to_dict()) == record
    assert record.to_dict()["schoolName"] == record.school_name


def test_attendance_percentage():
    assert make_school(1, totalStudents=404, dailyAttendance=380).attendance_percentage == 94
    assert make_school(1, totalStudents=0, dailyAttendance=10).attendance_percentage == 0


def test_from_snapshot_uses_child_key_when_id_missing():
    assert SchoolRecord.from_snapshot("003", {"schoolName": "X"}).id == "003"
    assert SchoolRecord.from_snapshot("003", {"id": "abc"}).id == "abc"
    assert SchoolRecord.from_snapshot(None, {}).id == ""


def test_emergency_contact():
    contact = EmergencyContact.from_dict({"name": "Fire Service", "number": 16163, "category": "fire"})
    assert contact.number == "16163"
    assert EmergencyContact.from_dict(contact.to_dict()) == contact
    assert EmergencyContact.from_snapshot("Police", {"number": "999"}).name == "Police"
