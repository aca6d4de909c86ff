import pytest

from import_engine.csv_parser import CsvReadError, iter_records


def test_header_skipped_and_rows_numbered_from_two(make_csv):
    records = list(iter_records(make_csv("1,10,a@b.com,A,B,CARD,hi", "2,20,,,,,")))
    assert [n for n, _ in records] == [2, 3]
    assert records[0][1]["campaignId"] == "1"
    assert records[1][1]["message"] == ""


def test_fields_are_trimmed_and_mapped_by_position():
    raw = b"whatever,the,header,says\n 7 , 12.5 , X@Y.com ,Ann,Lee,paypal, note \n"
    [(n, rec)] = list(iter_records(raw))
    assert n == 2
    assert rec == {
        "campaignId": "7",
        "amount": "12.5",
        "donorEmail": "X@Y.com",
        "donorFirstName": "Ann",
        "donorLastName": "Lee",
        "paymentMethod": "paypal",
        "message": "note",
    }


def test_short_records_are_padded(make_csv):
    [(_, rec)] = list(iter_records(make_csv("1,10")))
    assert rec["donorEmail"] == ""
    assert rec["message"] == ""


def test_blank_lines_do_not_consume_row_numbers(make_csv):
    records = list(iter_records(make_csv("1,10", "", "1,20")))
    assert [n for n, _ in records] == [2, 3]


def test_bom_is_stripped():
    raw = b"\xef\xbb\xbfcampaignId,amount\n1,5\n"
    assert len(list(iter_records(raw))) == 1


@pytest.mark.parametrize("raw", [b"", b"   \n", b"campaignId,amount\n"])
def test_empty_inputs_yield_nothing(raw):
    assert list(iter_records(raw)) == []


def test_invalid_utf8_is_rejected():
    with pytest.raises(CsvReadError, match="UTF-8"):
        list(iter_records(b"campaignId\n\xff\xfe\xfa\n"))
