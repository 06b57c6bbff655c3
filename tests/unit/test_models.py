import pytest

from healthadvisor.pipeline.records import parse_service_record

ROW = ["APC1", "P1", "Gen Hosp", "1 Main St", "Springfield", "IL", "62701", "HRR1", "100", "250.50", "180.25"]


def test_address_joins_street_city_state_zip():
    record = parse_service_record(ROW)
    assert record.address() == "1 Main St, Springfield, IL, 62701"
    assert record.address().count(", ") == 3


def test_address_keeps_empty_components_in_place():
    row = list(ROW)
    row[4] = ""
    assert parse_service_record(row).address() == "1 Main St, , IL, 62701"


def test_set_coordinates_is_write_once():
    record = parse_service_record(ROW)
    record.set_coordinates(39.78, -89.65)

    assert record.located is True
    assert (record.latitude, record.longitude) == (39.78, -89.65)
    with pytest.raises(ValueError):
        record.set_coordinates(0.0, 0.0)
    assert (record.latitude, record.longitude) == (39.78, -89.65)


def test_to_document_uses_index_field_names():
    record = parse_service_record(ROW)
    record.set_coordinates(39.78, -89.65)

    assert record.to_document() == {
        "APC": "APC1",
        "ProviderId": "P1",
        "ProviderName": "Gen Hosp",
        "ProviderStreetAddress": "1 Main St",
        "ProviderCity": "Springfield",
        "ProviderState": "IL",
        "ProviderZipCode": "62701",
        "ProviderHRR": "HRR1",
        "OutpatientServices": 100,
        "AverageEstimatedSubmittedCharges": 250.5,
        "AverageTotalPayments": 180.25,
        "Latitude": 39.78,
        "Longitude": -89.65,
    }
