"""Tests for the group comparison report."""

import json

import pytest

from dataloom.analysis import InputMismatchError, StatisticalReport, analyze, analyze_columns
from dataloom.analysis.report import extract_columns


class TestAnalyze:
    """Tests for analyze()."""

    def test_ab_example(self) -> None:
        """Test the two-group example end to end."""
        report = analyze([1, 3, 5, 7], ["A", "A", "B", "B"])

        assert isinstance(report, StatisticalReport)
        assert report.intra_group["A"].mean == 2.0
        assert report.intra_group["B"].mean == 6.0
        assert report.t_test.statistic < 0
        assert 0.05 < report.t_test.p_value < 1
        assert report.anova.statistic == pytest.approx(report.t_test.statistic**2)
        assert report.groups_compared == ["A", "B"]

    def test_single_group_means_no_difference(self) -> None:
        """Test the t-test default when only one group exists."""
        report = analyze([1, 2, 3], ["A", "A", "A"])

        assert report.t_test.p_value == 1.0
        assert report.t_test.statistic == 0.0
        assert not report.t_test.significant
        assert report.anova.p_value is None

    def test_ttest_uses_first_two_groups(self) -> None:
        """Test that extra groups only enter the ANOVA."""
        values = [1, 2, 1, 2, 50, 60]
        labels = ["A", "A", "B", "B", "C", "C"]

        report = analyze(values, labels)

        assert report.t_test.statistic == pytest.approx(0.0, abs=1e-12)
        assert report.anova.significant

    def test_groups_to_compare(self) -> None:
        """Test restricting the tests while describing every group."""
        values = [1, 2, 1, 2, 50, 60]
        labels = ["A", "A", "B", "B", "C", "C"]

        report = analyze(values, labels, groups_to_compare=["C", "A"])

        assert report.groups_compared == ["C", "A"]
        assert report.t_test.statistic > 0
        assert list(report.intra_group) == ["A", "B", "C"]

    def test_requested_group_absent_from_data(self) -> None:
        """Test that a requested label with no rows is reported as empty."""
        report = analyze([1, 2], ["A", "A"], groups_to_compare=["A", "Z"])

        assert report.intra_group["Z"].count == 0
        assert report.intra_group["Z"].mean is None
        assert report.t_test.p_value is None

    def test_degenerate_input_never_raises(self) -> None:
        """Test that empty input gives a report of sentinels."""
        report = analyze([], [])

        assert report.intra_group == {}
        assert report.t_test.p_value == 1.0
        assert report.anova.p_value is None

    def test_nan_value_gives_none_not_nan(self) -> None:
        """Test that a NaN measurement yields sentinels for its group."""
        report = analyze([float("nan"), 1, 2, 3], ["A", "A", "B", "B"])
        group_a = report.intra_group["A"]

        assert group_a.count == 2
        assert group_a.mean is None
        assert group_a.variance is None
        assert group_a.coefficient_of_variation is None
        assert report.intra_group["B"].mean == 2.5
        assert report.t_test.p_value is None

        data = json.loads(json.dumps(report.to_dict(), allow_nan=False))
        assert data["intraGroupAnalysis"]["A"]["mean"] is None

    def test_repeated_groups_to_compare(self) -> None:
        """Test that a label requested twice is compared once."""
        report = analyze([1, 3, 5, 7], ["A", "A", "B", "B"], groups_to_compare=["A", "A"])

        assert report.groups_compared == ["A"]
        assert report.t_test.p_value == 1.0

    def test_mismatched_input(self) -> None:
        """Test that misaligned inputs are the only hard failure."""
        with pytest.raises(InputMismatchError):
            analyze([1, 2, 3], ["A", "B"])

    def test_welch_option(self) -> None:
        """Test selecting Welch's t-test."""
        report = analyze([1, 3, 5, 7], ["A", "A", "B", "B"], equal_var=False)
        assert report.t_test.test == "Welch t-test"


class TestReportSerialization:
    """Tests for report output formats."""

    def test_to_dict_layout(self) -> None:
        """Test the camelCase wire layout."""
        data = analyze([1, 3, 5, 7], ["A", "A", "B", "B"]).to_dict()

        assert set(data) == {"tTest", "anova", "intraGroupAnalysis"}
        assert set(data["tTest"]) == {"pValue", "tStat", "significant"}
        assert set(data["anova"]) == {"pValue", "fStat", "significant"}
        assert data["intraGroupAnalysis"]["A"]["stdDev"] == pytest.approx(2**0.5)

    def test_sentinels_serialize_as_null(self) -> None:
        """Test that unavailable statistics become JSON null."""
        data = json.loads(json.dumps(analyze([1], ["A"]).to_dict()))

        assert data["anova"]["pValue"] is None
        assert data["anova"]["fStat"] is None
        assert data["intraGroupAnalysis"]["A"]["variance"] is None

    def test_format_for_display(self) -> None:
        """Test the human-readable report."""
        text = analyze([1, 3, 5, 7, 0, 0], ["A", "A", "B", "B", "C", "C"]).format_for_display()

        assert "**Student t-test**" in text
        assert "**Intragroup Analysis**" in text
        assert "B (n=2): mean=6.00" in text
        assert "C (n=2): mean=0.00, std dev=0.00, CV(%)=n/a" in text


class TestAnalyzeColumns:
    """Tests for analyzing two columns of a row set."""

    def test_ab_rows(self, ab_rows: list[dict]) -> None:
        """Test the row-level entry point."""
        report = analyze_columns(ab_rows, "v", "g")

        assert report.intra_group["A"].mean == 2.0
        assert report.intra_group["B"].mean == 6.0

    def test_skips_unusable_rows(self, sales_rows: list[dict]) -> None:
        """Test that unparseable values and empty labels are left out."""
        report = analyze_columns(sales_rows, "sales", "region")

        assert list(report.intra_group) == ["North", "South", "East"]
        assert report.intra_group["East"].count == 2
        assert report.intra_group["North"].mean == pytest.approx(125.0)

    def test_unknown_column(self, ab_rows: list[dict]) -> None:
        """Test that an unknown column is rejected."""
        with pytest.raises(ValueError, match="Column 'price' not found"):
            analyze_columns(ab_rows, "price", "g")

    def test_explicit_columns(self) -> None:
        """Test column validation against a given column list."""
        with pytest.raises(ValueError):
            analyze_columns([], "v", "g", columns=["v"])

    def test_extract_columns(self, sales_rows: list[dict]) -> None:
        """Test pulling aligned values and labels."""
        values, labels = extract_columns(sales_rows, "sales", "region")

        assert len(values) == len(labels) == 8
        assert values[0] == 120.0
        assert labels[0] == "North"
