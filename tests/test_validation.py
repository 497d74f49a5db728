import pytest

from validation import clean_sample, parse_upload, validate_sample

PROJECTS = {1, 2}


def entry(**overrides):
    data = {
        "sample_code": "S001", "project_id": "1", "metal": "Lead", "concentration": "0.09",
        "latitude": "23.74", "longitude": "86.41", "date_collected": "2024-01-15",
    }
    data.update(overrides)
    return data


def test_valid_entry_has_no_errors():
    assert validate_sample(entry(), PROJECTS) == []


def test_missing_fields_are_reported_together():
    errors = validate_sample(entry(metal="", concentration=None), PROJECTS)
    assert errors == ["Missing required fields: metal, concentration"]


@pytest.mark.parametrize("overrides, message", [
    ({"project_id": "9"}, "Invalid project ID"),
    ({"project_id": "abc"}, "Invalid project ID"),
    ({"latitude": "91"}, "Invalid latitude"),
    ({"longitude": "-180.5"}, "Invalid longitude"),
    ({"latitude": "north"}, "Invalid latitude"),
    ({"concentration": "-0.1"}, "Invalid concentration value"),
    ({"concentration": "nan"}, "Invalid concentration value"),
    ({"concentration": "inf"}, "Invalid concentration value"),
    ({"concentration": "1e400"}, "Invalid concentration value"),
    ({"ideal_value": "inf"}, "Invalid Ii value"),
    ({"project_id": 1.9}, "Invalid project ID"),
    ({"project_id": True}, "Invalid project ID"),
    ({"ideal_value": "0"}, "Invalid Ii value"),
    ({"weight": "-2"}, "Invalid Mi value"),
    ({"date_collected": "15/01/2024"}, "Invalid date"),
])
def test_invalid_values(overrides, message):
    assert message in validate_sample(entry(**overrides), PROJECTS)


def test_coordinate_bounds_are_inclusive():
    assert validate_sample(entry(latitude="-90", longitude="180"), PROJECTS) == []


def test_clean_sample_types_and_blank_overrides():
    cleaned = clean_sample(entry(ideal_value="", weight="0.7"))
    assert cleaned["project_id"] == 1
    assert cleaned["concentration"] == 0.09
    assert cleaned["ideal_value"] is None
    assert cleaned["weight"] == 0.7


def test_parse_upload_reads_template_rows():
    content = (
        "SampleID,ProjectID,District,City,Latitude,Longitude,Metal,Concentration,Ii,Mi,Date\n"
        "S001,1,Dhanbad,Jharia,23.7457,86.4152,Lead,0.09,0.01,0.7,2024-01-15\n"
        ",,,,,,,,,,\n"
        "S002,1,Dhanbad,Jharia,23.7461,86.4160,Arsenic,0.05,,,2024-01-15\n"
    ).encode("utf-8")
    rows = parse_upload(content)
    assert [r["sample_code"] for r in rows] == ["S001", "S002"]
    assert rows[0]["metal"] == "Lead"
    assert rows[1]["ideal_value"] == ""
    assert validate_sample(rows[1], PROJECTS) == []


def test_parse_upload_rejects_wrong_columns():
    with pytest.raises(ValueError, match="Invalid file format"):
        parse_upload(b"SampleID,Metal\nS1,Lead\n")


def test_integral_project_ids_are_accepted():
    assert validate_sample(entry(project_id=1), PROJECTS) == []
    assert validate_sample(entry(project_id=2.0), PROJECTS) == []
    assert clean_sample(entry(project_id=2.0))["project_id"] == 2


@pytest.mark.parametrize("content", [
    b"",
    b"SampleID,ProjectID,District,City,Latitude,Longitude,Metal,Concentration,Ii,Mi,Date\n"
    b"S\xff\xfe01,1,Dhanbad,Jharia,23.7,86.4,Lead,0.09,,,2024-01-15\n",
])
def test_parse_upload_rejects_unreadable_files(content):
    with pytest.raises(ValueError, match="Invalid file format"):
        parse_upload(content)
