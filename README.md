# centrifuger

Building blocks for classifying metagenomic sequencing reads against a
taxonomy: a taxonomy tree with rank handling and lineage queries,
FASTA/FASTQ reading (plain or gzip-compressed), extraction of read, barcode
and UMI segments, barcode whitelist correction and translation, and a few
compact data structures.

The package has no third-party dependencies.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

| Module | What it provides |
| --- | --- |
| `centrifuger.mapid` | `MapID`, a mapping of hashable values to ids `0..n-1` in insertion order, with binary `save`/`load` for integer values |
| `centrifuger.ranks` | `Rank`, `rank_from_name`, `rank_name`, `rank_level`, `is_canonical_rank` |
| `centrifuger.taxonomy` | `Taxonomy` built from `nodes.dmp`, `names.dmp` and a "sequence taxid" table; lineage, rank promotion, subtree and genome-length queries; binary `save`/`load`; `write_tree`, `write_names`, `write_conversion_table` |
| `centrifuger.partial_sum` | `PartialSum`: prefix sums, `search` for the largest index whose sum is at most a value, binary `save`/`load` |
| `centrifuger.reads` | `parse_records` for FASTA/FASTQ lines, `remove_read_id_suffix`, and `ReadFiles`, a reader over several files (globs with `*`, `-` for standard input) with iteration, `rewind` and `batch` |
| `centrifuger.read_formatter` | `ReadFormatter` for descriptions such as `"bc:0:15,um:16:27"` or `"bc:hd:2:0:-1"`, extracting segments of a sequence or header comment, with reverse complement for minus-strand segments |
| `centrifuger.barcode_corrector` | `BarcodeTrie` and `BarcodeCorrector`, correcting a barcode by one substitution to the most frequent whitelisted neighbour |
| `centrifuger.barcode_translator` | `BarcodeTranslator`, mapping barcodes chunk by chunk through a "to,from" table; unknown chunks raise `UnknownBarcodeError` |
| `centrifuger.sequence_compactor` | `SequenceCompactor`, encoding characters as their position in an alphabet |
| `centrifuger.cardinal_tree` | `CardinalTree`, a tree whose nodes have labelled child slots, with binary `save`/`load` |
| `centrifuger.difference_cover` | `DifferenceCover`, a cyclic difference cover with membership, compact index and `delta` queries |
| `centrifuger.elias` | `unary`, `gamma`, `delta` encoders and `read_gamma` decoder |
| `centrifuger.dense_array` | `DensePointerArray`, a read-only array of non-negative integers stored with variable bit widths |

## Examples

Taxonomy lookups:

```python
from centrifuger.taxonomy import Taxonomy

tax = Taxonomy.from_files("nodes.dmp", "names.dmp", "seqid2taxid.map", False)
seqid = tax.seq_name_to_id("NC_000913.3")
ctid = tax.seq_id_to_tax_id(seqid)
print(tax.orig_tax_id(ctid), tax.name_of(ctid))
print([tax.orig_tax_id(t) for t in tax.lineage(ctid)])
```

Taxa are addressed by compact ids in `range(tax.node_count)`; the value
`tax.node_count` stands for a taxon outside the tree.

Segment extraction:

```python
from centrifuger.read_formatter import ReadFormatter, Category

fmt = ReadFormatter("bc:0:15,um:16:27")
print(fmt.extract("ACGTACGTACGTACGTTTTTGGGGCCCCAAAA", Category.BARCODE, True))
```

Reading sequences:

```python
from centrifuger.reads import ReadFiles

with ReadFiles() as reads:
    reads.add("sample.fq.gz", False, False)
    for read in reads:
        print(read.id, len(read.seq))
```

Barcode correction:

```python
from centrifuger.barcode_corrector import BarcodeCorrector

corrector = BarcodeCorrector()
corrector.load_whitelist("whitelist.txt.gz")
status, barcode = corrector.correct("ACGTACGTACGTACGA", None)
```

## What this package does not do

It provides the taxonomy, input handling and supporting data structures
only. It does not build or load a sequence index, does not classify reads,
does not estimate abundances, and has no command-line programs. The binary
`save`/`load` methods cover the taxonomy and the individual structures
listed above, not a complete index.