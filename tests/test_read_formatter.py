import pytest

from centrifuger.read_formatter import Category, FormatError, ReadFormatter

SEQ = "ACGTTGCAAC"


def test_no_segments_returns_input():
    f = ReadFormatter()
    assert not f.need_extract(Category.BARCODE)
    assert f.extract(SEQ, Category.BARCODE) == SEQ


def test_whole_read_needs_no_extraction():
    f = ReadFormatter("r1:0:-1")
    assert not f.need_extract(Category.READ1)
    assert f.extract(SEQ, Category.READ1) == SEQ


def test_simple_range():
    f = ReadFormatter("bc:0:3")
    assert f.need_extract(Category.BARCODE)
    assert f.extract(SEQ, Category.BARCODE) == SEQ[:4]


def test_negative_positions_and_clamp():
    f = ReadFormatter("um:-4:-1;r2:2:100")
    assert f.extract(SEQ, Category.UMI) == SEQ[-4:]
    assert f.extract(SEQ, Category.READ2) == SEQ[2:]


def test_multiple_segments_concatenate():
    f = ReadFormatter("bc:0:1,bc:4:5")
    assert f.segment_count(Category.BARCODE) == 2
    assert f.extract(SEQ, Category.BARCODE) == SEQ[0:2] + SEQ[4:6]


def test_minus_strand_reverse_complement():
    f = ReadFormatter("bc:0:3:-")
    assert f.extract("AAACGG", Category.BARCODE) == "GTTT"
    assert f.extract("AAACGG", Category.BARCODE, need_complement=False) == "CAAA"


def test_plus_strand_explicit():
    f = ReadFormatter("bc:1:2:+")
    assert f.extract(SEQ, Category.BARCODE) == SEQ[1:3]


def test_extract_seq_and_qual():
    f = ReadFormatter("bc:0:3:-")
    seq, qual = f.extract_seq_and_qual("ACGTAA", "ABCDEF", Category.BARCODE)
    assert qual == "DCBA"
    assert len(seq) == len(qual)
    seq2, qual2 = f.extract_seq_and_qual("ACGTAA", None, Category.BARCODE)
    assert seq2 == seq and qual2 is None


def test_comment_field_by_number():
    f = ReadFormatter("bc:hd:1:0:-1")
    assert f.is_in_comment(Category.BARCODE)
    assert f.extract("foo CB:Z:ACGT bar", Category.BARCODE) == "CB:Z:ACGT"


def test_comment_field_first():
    f = ReadFormatter("bc:hd:0:0:-1")
    assert f.extract("foo\tbar", Category.BARCODE) == "foo"


def test_comment_field_by_prefix():
    f = ReadFormatter("bc:hd:CB:5:-1")
    assert f.extract("x CB:Z:ACGT y", Category.BARCODE) == "ACGT"


def test_comment_prefix_missing():
    f = ReadFormatter("bc:hd:CB:5:-1")
    with pytest.raises(ValueError):
        f.extract("nothing here", Category.BARCODE)


@pytest.mark.parametrize("spec", ["xx:0:1", "bc:0", "bc:1:2:+:x", "bc01", "bc:hd:1"])
def test_bad_format(spec):
    with pytest.raises(FormatError):
        ReadFormatter(spec)


def test_segment_counts_and_add_segment():
    f = ReadFormatter("r1:0:-1,bc:0:3;um:4:7")
    f.add_segment(0, 5, 1, Category.READ2)
    assert f.segment_count() == 4
    assert f.segment_count(Category.READ2) == 1
    assert not f.is_in_comment(Category.READ2)
    assert f.extract(SEQ, Category.READ2) == SEQ[:6]