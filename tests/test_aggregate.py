from ksense_assessment.aggregate import SubmissionPayload, aggregate, alert_rows, risk_rows, summarize
from ksense_assessment.models import PatientRecord


def population(record):
    return [
        record("DEMO001", blood_pressure="120/80", temperature=98.6, age=45),       # score 4 (3+0+1)
        record("DEMO002", blood_pressure="150/95", temperature=101.5, age=72),      # 8, fever
        record("DEMO003", blood_pressure="119/79", temperature="100.2", age=30),    # 2, fever
        record("DEMO004", blood_pressure="INVALID", temperature="TEMP_ERROR", age="unknown"),
        record("DEMO005", blood_pressure="118/75", temperature=98.2, age=25),       # 1
        record("DEMO006", blood_pressure="140/", temperature=99.8, age=67),         # 0+1+2, fever, dq
    ]


def test_partitions_ids_in_input_order(record):
    payload = aggregate(population(record))
    assert payload.high_risk == ["DEMO001", "DEMO002"]
    assert payload.fever == ["DEMO002", "DEMO003", "DEMO006"]
    assert payload.data_quality == ["DEMO004", "DEMO006"]


def test_one_id_can_be_in_several_lists(record):
    payload = aggregate([record("DEMO010", blood_pressure="160/100", temperature="102", age="N/A")])
    assert payload.high_risk == ["DEMO010"]
    assert payload.fever == ["DEMO010"]
    assert payload.data_quality == ["DEMO010"]


def test_records_do_not_influence_each_other(record):
    records = population(record)
    together = aggregate(records)
    for r in records:
        alone = aggregate([r])
        assert (r.patient_id in together.high_risk) == bool(alone.high_risk)
        assert (r.patient_id in together.fever) == bool(alone.fever)
        assert (r.patient_id in together.data_quality) == bool(alone.data_quality)


def test_accepts_any_iterable(record):
    payload = aggregate(r for r in population(record))
    assert len(payload.high_risk) == 2


def test_empty_input():
    payload = aggregate([])
    assert payload.to_json() == {"high_risk_patients": [], "fever_patients": [], "data_quality_issues": []}


def test_payload_json_keys():
    payload = SubmissionPayload(high_risk=["A"], fever=["B"], data_quality=["C", "A"])
    assert payload.to_json() == {
        "high_risk_patients": ["A"],
        "fever_patients": ["B"],
        "data_quality_issues": ["C", "A"],
    }
    assert payload.counts() == {"high_risk": 1, "fever": 1, "data_quality": 2}


def test_risk_rows(record):
    rows = risk_rows(population(record)[:3])
    assert rows[0] == {"patient_id": "DEMO001", "name": "Patient DEMO001", "risk_score": 4, "risk_level": "High"}
    assert [r["risk_level"] for r in rows] == ["High", "High", "Moderate"]


def test_alert_rows_one_per_alert(record):
    rows = alert_rows([record("DEMO002", blood_pressure="150/95", temperature=101.5, age=72)])
    assert [r["alert_type"] for r in rows] == ["high_risk", "fever"]
    assert rows[0]["alert_reason"] == "High risk patient (score: 8)"


def test_summarize_counts_levels_and_factors(record):
    summary = summarize(population(record), total=50)
    assert summary.patients == 6
    assert summary.total == 50
    assert summary.breakdown == {"High": 2, "Moderate": 2, "Low": 2}
    # stage-2 BP: DEMO002 only
    assert summary.high_blood_pressure == 16.7
    # age >= 65: DEMO002, DEMO006
    assert summary.advanced_age == 33.3
    assert summary.fever == 50.0


def test_summarize_empty_page():
    summary = summarize([])
    assert summary.patients == 0
    assert summary.breakdown == {"High": 0, "Moderate": 0, "Low": 0}
    assert summary.fever == 0.0


def test_all_missing_record_is_data_quality_only():
    payload = aggregate([PatientRecord(patient_id="DEMO099")])
    assert payload.high_risk == []
    assert payload.fever == []
    assert payload.data_quality == ["DEMO099"]
