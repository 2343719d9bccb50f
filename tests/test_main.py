"""Integration tests for the genotyping pipeline."""

from pathlib import Path

import pandas as pd
import pytest

from apoe_genotyper import main
from apoe_genotyper.config import Config
from apoe_genotyper.exceptions import NoInputFilesError, ReportParseError
from apoe_genotyper.main import genotype_sample, run_genotyping, run_inspect, select_samples
from apoe_genotyper.models import ApoeGenotype, Statistics
from apoe_genotyper.writers.report import GenotypeReport

RS7412 = ("19", 44908822, "C", "T")
RS429358 = ("19", 44908684, "T", "C")


def rs7412(gt: str) -> tuple:
    return (*RS7412, gt)


def rs429358(gt: str) -> tuple:
    return (*RS429358, gt)


def read_report(path: Path) -> list[str]:
    return path.read_text().splitlines()


class TestGenotypeSample:
    """Tests for genotype_sample()."""

    def test_no_records_is_3_3(self, write_vcf) -> None:
        """No record at either site resolves to 3/3."""
        vcf = write_vcf("S1.vcf", [("19", 100, "A", "G", "0/1")])

        result = genotype_sample(vcf)

        assert result.sample_id == "S1"
        assert result.genotype == ApoeGenotype.E3_E3
        assert result.calls == {"rs7412": "0/0", "rs429358": "0/0"}
        assert result.zygosities == {"rs7412": "HOM_REF", "rs429358": "HOM_REF"}
        assert result.error is None

    def test_rs7412_hom_alt_only_is_1_1(self, write_vcf) -> None:
        """rs7412 1/1 with no rs429358 record resolves to 1/1."""
        vcf = write_vcf("S2.vcf", [rs7412("1/1")])
        assert genotype_sample(vcf).genotype == ApoeGenotype.E1_E1

    def test_het_het_is_first_rule(self, write_vcf) -> None:
        """0/1 at both sites resolves to the first HET/HET rule."""
        vcf = write_vcf("S3.vcf", [rs429358("0/1"), rs7412("0/1")])
        assert genotype_sample(vcf).genotype == ApoeGenotype.E1_E3

    @pytest.mark.parametrize(
        "rows,expected",
        [
            ([rs429358("1/1")], ApoeGenotype.E4_E4),
            ([rs429358("0/1")], ApoeGenotype.E3_E4),
            ([rs429358("1/0")], ApoeGenotype.E3_E4),
            ([rs7412("0/1")], ApoeGenotype.E2_E3),
            ([rs429358("0/1"), rs7412("1/1")], ApoeGenotype.E1_E4),
            ([rs429358("1/1"), rs7412("0/1")], ApoeGenotype.E1_E2),
            ([rs429358("1/1"), rs7412("1/1")], ApoeGenotype.E1_E1),
            ([rs429358("0/0"), rs7412("0/0")], ApoeGenotype.E3_E3),
            ([rs7412("./.")], ApoeGenotype.UNKNOWN),
        ],
    )
    def test_genotypes(self, write_vcf, rows: list, expected: ApoeGenotype) -> None:
        """Site calls from the VCF resolve through the rule table."""
        vcf = write_vcf("S.vcf", rows)
        assert genotype_sample(vcf).genotype == expected

    def test_multiallelic_site(self, write_vcf) -> None:
        """A split multi-allelic rs7412 record is matched on its C>T part."""
        vcf = write_vcf("S.vcf", [("19", 44908822, "C", "T,G", "1/2")])

        result = genotype_sample(vcf)

        assert result.calls["rs7412"] == "1/0"
        assert result.genotype == ApoeGenotype.E2_E3

    def test_chr_prefixed_vcf(self, write_vcf) -> None:
        """chr19 contig names are handled."""
        vcf = write_vcf(
            "S.vcf", [("chr19", 44908684, "T", "C", "1/1")], chr_prefix=True
        )
        assert genotype_sample(vcf).genotype == ApoeGenotype.E4_E4

    def test_duplicate_records_is_unknown(self, write_vcf) -> None:
        """Two rs7412 records give UNKNOWN with the error kept."""
        vcf = write_vcf("S4.vcf", [rs7412("0/1"), rs7412("1/1")])

        result = genotype_sample(vcf)

        assert result.genotype == ApoeGenotype.UNKNOWN
        assert "rs7412" in result.error

    def test_unreadable_file_is_unknown(self, vcf_dir: Path) -> None:
        """A file pysam cannot parse gives UNKNOWN."""
        bad = vcf_dir / "bad.vcf"
        bad.write_text("garbage\n")

        result = genotype_sample(bad)

        assert result.genotype == ApoeGenotype.UNKNOWN
        assert result.error is not None


class TestSelectSamples:
    """Tests for select_samples()."""

    def test_skips_reported_repeated_and_empty(self, write_vcf, vcf_dir: Path) -> None:
        """Reported samples, repeated IDs and zero-byte files are not selected."""
        known = write_vcf("S1.vcf", [])
        new = write_vcf("S2.vcf", [])
        repeat = write_vcf("S2.vcf.gz", [])
        empty = vcf_dir / "S3.vcf"
        empty.write_text("")
        report = GenotypeReport()
        report.append("S1", ApoeGenotype.E3_E3)
        stats = Statistics()

        selected = select_samples([known, new, repeat, empty], report, stats)

        assert selected == [new]
        assert stats.skipped_existing == 1
        assert stats.skipped_duplicate == 1
        assert stats.skipped_empty == 1


class TestRunGenotyping:
    """Tests for run_genotyping()."""

    def test_report_written(self, write_vcf, vcf_dir: Path, tmp_path: Path) -> None:
        """Every sample gets one row; the report header comes first."""
        write_vcf("S1.vcf", [])
        write_vcf("S2.vcf", [rs7412("1/1")])
        write_vcf("S3.vcf", [rs429358("0/1"), rs7412("0/1")])
        config = Config(input_dir=vcf_dir, output_dir=tmp_path / "out")

        stats = run_genotyping(config)

        assert read_report(config.report_file) == [
            "SampleID\tAPOE_genotype",
            "S1\tAPOE-3/3",
            "S2\tAPOE-1/1",
            "S3\tAPOE-1/3",
        ]
        assert stats.files_found == 3
        assert stats.processed == 3
        assert stats.errors == 0

    def test_default_report_in_input_dir(self, write_vcf, vcf_dir: Path) -> None:
        """Without an output directory the report is written next to the inputs."""
        write_vcf("S1.vcf", [])

        run_genotyping(Config(input_dir=vcf_dir))

        assert (vcf_dir / "APOE_genotype_report.tsv").exists()

    def test_bad_sample_does_not_stop_batch(self, write_vcf, vcf_dir: Path) -> None:
        """Duplicate site records give APOE_unknown and the next sample is processed."""
        write_vcf("A.vcf", [rs7412("0/1"), rs7412("0/1")])
        write_vcf("B.vcf", [rs429358("1/1")])
        config = Config(input_dir=vcf_dir)

        stats = run_genotyping(config)

        assert read_report(config.report_file)[1:] == ["A\tAPOE_unknown", "B\tAPOE-4/4"]
        assert stats.errors == 1
        assert stats.unknown == 1

    def test_existing_sample_skipped(self, write_vcf, vcf_dir: Path, tmp_path: Path) -> None:
        """A sample already in the report is not re-genotyped or overwritten."""
        report_file = tmp_path / "report.tsv"
        report_file.write_text("SampleID\tAPOE_genotype\nS1\tAPOE-4/4\n")
        write_vcf("S1.vcf", [])
        write_vcf("S2.vcf", [])
        config = Config(input_dir=vcf_dir, report_file=report_file)

        stats = run_genotyping(config)

        assert read_report(report_file) == [
            "SampleID\tAPOE_genotype",
            "S1\tAPOE-4/4",
            "S2\tAPOE-3/3",
        ]
        assert stats.skipped_existing == 1
        assert stats.processed == 1

    def test_rerun_is_idempotent(self, write_vcf, vcf_dir: Path) -> None:
        """A second run over the same inputs leaves the report unchanged."""
        write_vcf("S1.vcf", [rs7412("0/1")])
        write_vcf("S2.vcf", [rs429358("0/1")])
        config = Config(input_dir=vcf_dir)

        run_genotyping(config)
        first = config.report_file.read_text()
        stats = run_genotyping(config)

        assert config.report_file.read_text() == first
        assert stats.processed == 0
        assert stats.skipped_existing == 2

    def test_same_sample_twice_in_one_run(self, write_vcf, vcf_dir: Path, tmp_path: Path) -> None:
        """Two files for the same sample yield a single row."""
        write_vcf("S1.vcf", [rs429358("1/1")])
        (vcf_dir / "sub").mkdir()
        (vcf_dir / "sub" / "S1.vcf").write_text((vcf_dir / "S1.vcf").read_text())
        config = Config(input_dir=vcf_dir, output_dir=tmp_path / "out")

        stats = run_genotyping(config)

        rows = read_report(config.report_file)[1:]
        assert rows == ["S1\tAPOE-4/4"]
        assert stats.skipped_duplicate == 1

    def test_empty_file_skipped(self, write_vcf, vcf_dir: Path) -> None:
        """Zero-byte files get no row."""
        (vcf_dir / "empty.vcf").write_text("")
        write_vcf("S1.vcf", [])
        config = Config(input_dir=vcf_dir)

        stats = run_genotyping(config)

        assert read_report(config.report_file)[1:] == ["S1\tAPOE-3/3"]
        assert stats.skipped_empty == 1

    def test_pattern_filter(self, write_vcf, vcf_dir: Path) -> None:
        """Only files matching the pattern are genotyped."""
        write_vcf("batch1_S1.vcf", [])
        write_vcf("batch2_S2.vcf", [])
        config = Config(input_dir=vcf_dir, pattern="batch1_")

        run_genotyping(config)

        assert read_report(config.report_file)[1:] == ["batch1_S1\tAPOE-3/3"]

    def test_malformed_report_is_fatal(self, write_vcf, vcf_dir: Path) -> None:
        """A corrupt report header aborts before any sample is processed."""
        write_vcf("S1.vcf", [])
        config = Config(input_dir=vcf_dir)
        config.report_file.write_text("Sample\tGenotype\nS0\tAPOE-3/3\n")

        with pytest.raises(ReportParseError):
            run_genotyping(config)

        assert config.report_file.read_text() == "Sample\tGenotype\nS0\tAPOE-3/3\n"

    def test_no_input_files(self, vcf_dir: Path) -> None:
        """An input directory without VCFs is an error."""
        (vcf_dir / "notes.txt").write_text("nothing here")

        with pytest.raises(NoInputFilesError):
            run_genotyping(Config(input_dir=vcf_dir))

    def test_parallel_workers(self, write_vcf, vcf_dir: Path) -> None:
        """A process pool gives the same rows as a sequential run."""
        expected = {}
        for i, (rows, label) in enumerate(
            [
                ([], "APOE-3/3"),
                ([rs429358("1/1")], "APOE-4/4"),
                ([rs7412("0/1")], "APOE-2/3"),
                ([rs7412("0/1"), rs7412("0/1")], "APOE_unknown"),
            ]
        ):
            write_vcf(f"S{i}.vcf", rows)
            expected[f"S{i}"] = label
        config = Config(input_dir=vcf_dir, workers=2)

        stats = run_genotyping(config)

        report = GenotypeReport.load(config.report_file)
        assert {sample: g.report_label for sample, g in report} == expected
        assert stats.processed == 4

    def test_interrupt_keeps_completed_rows(
        self, write_vcf, vcf_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """An interrupted sample never appears; samples before it stay reported."""
        for name in ["A.vcf", "B.vcf", "C.vcf"]:
            write_vcf(name, [])
        config = Config(input_dir=vcf_dir)
        genotype = main.genotype_sample

        def interrupt_on_b(vcf_file: Path):
            if vcf_file.name == "B.vcf":
                raise KeyboardInterrupt
            return genotype(vcf_file)

        monkeypatch.setattr(main, "genotype_sample", interrupt_on_b)

        with pytest.raises(KeyboardInterrupt):
            run_genotyping(config)

        assert config.report_file.read_text() == "SampleID\tAPOE_genotype\nA\tAPOE-3/3\n"

    def test_interrupt_with_workers(
        self, write_vcf, vcf_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """An interrupt in the pool loop leaves a loadable report without that sample."""
        for name in ["A.vcf", "B.vcf", "C.vcf"]:
            write_vcf(name, [])
        config = Config(input_dir=vcf_dir, workers=2)
        record_result = main._record_result

        def interrupt_on_b(result, *args) -> None:
            if result.sample_id == "B":
                raise KeyboardInterrupt
            record_result(result, *args)

        monkeypatch.setattr(main, "_record_result", interrupt_on_b)

        with pytest.raises(KeyboardInterrupt):
            run_genotyping(config)

        lines = read_report(config.report_file)
        assert lines[0] == "SampleID\tAPOE_genotype"
        assert set(lines[1:]) <= {"A\tAPOE-3/3", "C\tAPOE-3/3"}
        assert "B" not in GenotypeReport.load(config.report_file)


class TestRunInspect:
    """Tests for run_inspect()."""

    def test_variants_table(self, write_vcf, vcf_dir: Path, tmp_path: Path) -> None:
        """Site records are dumped per sample; samples without records get an empty row."""
        write_vcf("S1.vcf", [rs429358("0/1"), rs7412("1/1")])
        write_vcf("S2.vcf", [("19", 100, "A", "G", "0/1")])
        config = Config(input_dir=vcf_dir, output_dir=tmp_path / "out")

        output = run_inspect(config)

        df = pd.read_csv(output, sep="\t", dtype=str, keep_default_na=False)
        assert list(df.columns) == [
            "SampleID", "site", "chrom", "pos", "id", "ref", "alt", "gt",
        ]
        assert df["SampleID"].tolist() == ["S1", "S1", "S2"]
        assert df["site"].tolist() == ["rs429358", "rs7412", ""]
        assert df["pos"].tolist() == ["44908684", "44908822", ""]
        assert df["gt"].tolist() == ["0/1", "1/1", ""]
