"""Unit tests for SEO CSV parsing."""

import pytest

from webx_crm.services.reports import ReportError, parse_seo_csv


class TestParseSeoCsv:
    """Test turning a CSV upload into report sections."""

    def test_single_section_without_tab_column(self) -> None:
        content = (
            b"Client,Website,Month,Keyword,Position\n"
            b"Kiwi Plumbing,kiwiplumbing.co.nz,2024-06,plumber auckland,3\n"
            b"Kiwi Plumbing,kiwiplumbing.co.nz,2024-06,emergency plumber,7\n"
        )

        report = parse_seo_csv(content)

        assert report.client_name == "Kiwi Plumbing"
        assert report.website == "kiwiplumbing.co.nz"
        assert report.period == "2024-06"
        assert report.row_count == 2
        assert [s.name for s in report.sections] == ["SEO Data"]
        assert report.sections[0].columns == ["Client", "Website", "Month", "Keyword", "Position"]
        assert report.sections[0].rows[1] == [
            "Kiwi Plumbing",
            "kiwiplumbing.co.nz",
            "2024-06",
            "emergency plumber",
            "7",
        ]

    def test_rows_grouped_by_tab_in_first_seen_order(self) -> None:
        content = (
            b"Tab,Keyword,Clicks\n"
            b"Keywords,plumber,10\n"
            b"Traffic,organic,120\n"
            b"Keywords,drain,4\n"
            b",misc,1\n"
        )

        report = parse_seo_csv(content)

        assert [s.name for s in report.sections] == ["Keywords", "Traffic", "Data"]
        assert report.sections[0].columns == ["Keyword", "Clicks"]
        assert report.sections[0].rows == [["plumber", "10"], ["drain", "4"]]
        assert report.client_name == ""

    def test_alternative_column_names(self) -> None:
        content = b"Client Name,Domain,Report Month,Keyword\nAcme,acme.nz,May 2024,widgets\n"

        report = parse_seo_csv(content)

        assert (report.client_name, report.website, report.period) == (
            "Acme",
            "acme.nz",
            "May 2024",
        )

    def test_byte_order_mark_and_quoting(self) -> None:
        content = '\ufeffKeyword,Note\n"plumber, auckland","says ""hi"""\n'.encode()

        report = parse_seo_csv(content)

        assert report.sections[0].columns == ["Keyword", "Note"]
        assert report.sections[0].rows == [["plumber, auckland", 'says "hi"']]

    def test_blank_lines_are_skipped(self) -> None:
        report = parse_seo_csv(b"Keyword\n\nplumber\n,\n")

        assert report.row_count == 1

    def test_to_dict(self) -> None:
        data = parse_seo_csv(b"Client,Keyword\nAcme,widgets\n").to_dict()

        assert data == {
            "client_name": "Acme",
            "website": "",
            "period": "",
            "row_count": 1,
            "sections": [
                {
                    "name": "SEO Data",
                    "columns": ["Client", "Keyword"],
                    "rows": [["Acme", "widgets"]],
                }
            ],
        }

    @pytest.mark.parametrize("content", [b"", b"\n\n", b"Keyword,Clicks\n"])
    def test_no_data_rows(self, content: bytes) -> None:
        with pytest.raises(ReportError, match="CSV contains no data rows"):
            parse_seo_csv(content)

    @pytest.mark.parametrize(
        "content",
        [
            b"\xff\xfe\x00garbage",
            b"Keyword,Clicks\nplumber\n",
            b"Keyword,Keyword\nplumber,3\n",
            b'Keyword\n"unterminated\n',
        ],
    )
    def test_invalid_csv(self, content: bytes) -> None:
        with pytest.raises(ReportError, match="Invalid CSV format"):
            parse_seo_csv(content)
