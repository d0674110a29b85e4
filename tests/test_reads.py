import gzip

import pytest

from centrifuger.reads import Read, ReadFiles, parse_records, remove_read_id_suffix


FASTQ = "@r1/1 first read\nACGT\n+\nIIII\n@r2/2\nGGCC\n+\nHHHH\n"
FASTA = ">s1 chromosome\nACGT\nTTGG\n>s2\nCC\n"


def _write(path, text):
    path.write_text(text)
    return str(path)


def test_remove_read_id_suffix():
    assert remove_read_id_suffix("abc/1") == "abc"
    assert remove_read_id_suffix("abc/2") == "abc"
    assert remove_read_id_suffix("abc/3") == "abc/3"
    assert remove_read_id_suffix("a") == "a"


def test_parse_fastq():
    records = list(parse_records(FASTQ.splitlines(True)))
    assert records == [
        Read("r1/1", "ACGT", "IIII", "first read"),
        Read("r2/2", "GGCC", "HHHH", None),
    ]


def test_parse_multiline_fasta():
    records = list(parse_records(FASTA.splitlines(True)))
    assert [r.id for r in records] == ["s1", "s2"]
    assert records[0].seq == "ACGT" + "TTGG"
    assert records[0].qual is None
    assert records[1].seq == "CC"


def test_parse_quality_length_mismatch():
    with pytest.raises(ValueError):
        list(parse_records(["@r\n", "ACGT\n", "+\n", "II\n"]))


def test_read_files_iterates_and_strips_suffix(tmp_path):
    path = _write(tmp_path / "a.fq", FASTQ)
    with ReadFiles() as rf:
        rf.add(path)
        reads = list(rf)
    assert [r.id for r in reads] == ["r1", "r2"]
    assert all(r.comment is None for r in reads)


def test_need_comment(tmp_path):
    path = _write(tmp_path / "a.fq", FASTQ)
    rf = ReadFiles(need_comment=True)
    rf.add(path)
    first = rf.next()
    assert first.comment == "first read"
    rf.close()


def test_gzip_input(tmp_path):
    path = tmp_path / "a.fa.gz"
    with gzip.open(path, "wt") as fh:
        fh.write(FASTA)
    rf = ReadFiles()
    rf.add(str(path))
    assert [r.seq for r in rf] == ["ACGTTTGG", "CC"]


def test_multiple_files_and_rewind(tmp_path):
    a = _write(tmp_path / "a.fa", FASTA)
    b = _write(tmp_path / "b.fq", FASTQ)
    rf = ReadFiles()
    rf.add(a)
    rf.add(b)
    first = [r.id for r in rf]
    assert first == ["s1", "s2", "r1", "r2"]
    assert rf.next() is None
    rf.rewind()
    assert [r.id for r in rf] == first


def test_glob(tmp_path):
    _write(tmp_path / "x1.fa", ">a\nA\n")
    _write(tmp_path / "x2.fa", ">b\nC\n")
    rf = ReadFiles()
    assert rf.add(str(tmp_path / "x*.fa")) == 2
    assert rf.file_count == 2
    assert rf.file_name(0).endswith("x1.fa")
    assert [r.id for r in rf] == ["a", "b"]


def test_batch_stops_at_file_end(tmp_path):
    a = _write(tmp_path / "a.fa", FASTA)
    empty = _write(tmp_path / "e.fa", "")
    b = _write(tmp_path / "b.fq", ">only\nAC\n")
    rf = ReadFiles()
    for p in (a, empty, b):
        rf.add(p)
    batch, index = rf.batch(10, stop_when_file_ends=True)
    assert [r.id for r in batch] == ["s1", "s2"]
    assert index == 0
    batch, index = rf.batch(10, stop_when_file_ends=True)
    assert [r.id for r in batch] == ["only"]
    assert index == 2
    batch, index = rf.batch(10, stop_when_file_ends=True)
    assert batch == []
    assert index == rf.file_count


def test_batch_without_stop_spans_files(tmp_path):
    a = _write(tmp_path / "a.fa", FASTA)
    b = _write(tmp_path / "b.fq", FASTQ)
    rf = ReadFiles()
    rf.add(a)
    rf.add(b)
    batch, _ = rf.batch(3)
    assert [r.id for r in batch] == ["s1", "s2", "r1"]
    batch, index = rf.batch(3)
    assert [r.id for r in batch] == ["r2"]
    assert index == 2


def test_paired_batch(tmp_path):
    path = _write(tmp_path / "i.fq", FASTQ)
    rf = ReadFiles()
    rf.add(path, has_mate=True, interleaved=True)
    assert rf.has_mate and rf.is_interleaved
    batch, _ = rf.batch(5, paired=True)
    assert len(batch) == 1
    left, right = batch[0]
    assert (left.id, right.id) == ("r1", "r2")


def test_paired_batch_missing_mate(tmp_path):
    path = _write(tmp_path / "i.fa", ">a\nA\n")
    rf = ReadFiles()
    rf.add(path)
    with pytest.raises(ValueError):
        rf.batch(5, paired=True)